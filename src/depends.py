from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.clock import SystemClock
from src.app.services.clock import Clock
from src.domain.account import Rent


def build_engine(db_uri: str, **kwargs) -> AsyncEngine:
    """
    Create the async engine for the account store

    SQLite ignores SELECT ... FOR UPDATE, so every transaction there starts
    with BEGIN IMMEDIATE and takes the database write lock up front. Two
    payments against the same invoice then run one after the other.
    """
    engine = create_async_engine(db_uri, echo=False, future=True, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = build_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_clock() -> Clock:
    return SystemClock()


def get_rent() -> Rent:
    return Rent(
        lamports_per_byte_year=ApplicationConfig.RENT_LAMPORTS_PER_BYTE_YEAR,
        exemption_threshold=ApplicationConfig.RENT_EXEMPTION_THRESHOLD,
    )
