"""Test config and shared fixtures."""
import pytest
from typing import AsyncGenerator, List
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from generic_dao.database.sql_driver import SQLDriver
from generic_dao.repository import GenericRepository
from tests.models import Hero, Team, HeroRepository


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def driver() -> AsyncGenerator[SQLDriver, None]:
    """Create a driver over a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    sql_driver = SQLDriver(engine=engine)
    await sql_driver.create_all()

    yield sql_driver

    await sql_driver.drop_all()
    await sql_driver.disconnect()


@pytest.fixture
def hero_repository(driver: SQLDriver) -> HeroRepository:
    return HeroRepository(driver)


@pytest.fixture
def team_repository(driver: SQLDriver) -> GenericRepository[Team]:
    return GenericRepository(driver, Team)


@pytest.fixture
async def sample_heroes(hero_repository: HeroRepository) -> List[Hero]:
    """Create sample heroes (two of them share the name "Deadpond")."""
    heroes = [
        Hero(name="Deadpond", secret_name="Dive Wilson", age=30),
        Hero(name="Spider-Boy", secret_name="Pedro Parqueador", age=16),
        Hero(name="Rusty-Man", secret_name="Tommy Sharp", age=48),
        Hero(name="Deadpond", secret_name="Wade Winston", age=35),
    ]
    for hero in heroes:
        await hero_repository.create(hero)
    return heroes
