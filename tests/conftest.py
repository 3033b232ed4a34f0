"""Shared test fixtures for the portfolio storage service."""
import pytest
import pytest_asyncio

from config.settings import AdminSeedConfig, DatabaseConfig, Settings
from models.schemas import ServiceCreate, ContactMessageCreate


# Cheap seed admin for tests; hashing is still real pbkdf2
TEST_ADMIN = AdminSeedConfig(username="admin", email="admin@alqudimi.com", password="admin123")


@pytest.fixture
def memory_settings() -> Settings:
    """Settings with no DATABASE_URL: the service stays on memory storage."""
    return Settings(environment="test", database=DatabaseConfig(url=""), admin=TEST_ADMIN)


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path}/portfolio_test.db"


@pytest.fixture
def sql_settings(sqlite_url) -> Settings:
    return Settings(
        environment="development",
        database=DatabaseConfig(url=sqlite_url, connect_timeout=5.0),
        admin=TEST_ADMIN,
    )


@pytest.fixture
def memory_store():
    from database.store_memory import InMemoryStorage
    return InMemoryStorage(admin=TEST_ADMIN)


@pytest.fixture
def empty_memory_store():
    from database.store_memory import InMemoryStorage
    return InMemoryStorage(admin=TEST_ADMIN, seed_on_init=False)


@pytest_asyncio.fixture
async def database(sqlite_url):
    """A SQLite database with the schema created and no rows."""
    from database.session import Database
    db = Database(sqlite_url, environment="development")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def sql_store(database):
    from database.store import SqlStorage
    return SqlStorage(database)


@pytest_asyncio.fixture
async def seeded_sql_store(sql_settings):
    """SqlStorage over a database brought up by DatabaseInitializer."""
    from database.initializer import DatabaseInitializer
    from database.store import SqlStorage

    initializer = DatabaseInitializer(sql_settings)
    assert await initializer.test_connection()
    await initializer.initialize_database()
    yield SqlStorage(initializer.database)
    await initializer.close()


@pytest.fixture
def sample_service() -> ServiceCreate:
    return ServiceCreate(
        title="استشارات تقنية",
        title_en="Tech Consulting",
        description="استشارات في البنية التحتية",
        icon="Lightbulb",
        color="orange",
        features=["Cloud", "DevOps"],
        order=5,
    )


@pytest.fixture
def sample_message() -> ContactMessageCreate:
    return ContactMessageCreate(
        name="Sara",
        email="sara@example.com",
        subject="Website quote",
        service_type="web",
        message="I need a bilingual landing page.",
    )
