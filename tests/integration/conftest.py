import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.services.clock import FixedClock
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.value_transfer import SystemProgramTransfer
from src.depends import build_engine, get_clock, get_session

LEDGER_NOW = 1_700_000_000


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite engine shared by every connection of one test"""
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return FixedClock(LEDGER_NOW)


@pytest_asyncio.fixture
def ledger(db_session, clock):
    """Adapters wired to the test session, as the routes wire them"""
    account_repo = SqlAlchemyAccountRepository(db_session)
    return {
        "uow": SqlAlchemyUnitOfWork(db_session),
        "account_repo": account_repo,
        "value_transfer": SystemProgramTransfer(account_repo),
        "clock": clock,
    }


@pytest_asyncio.fixture
async def client(db_session, clock):
    """Create test client with database session and clock overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
