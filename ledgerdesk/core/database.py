from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ledgerdesk.core.config import settings

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA busy_timeout=5000",
)


def create_engine_for(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying SQLite pragmas on every new connection."""
    async_engine = create_async_engine(database_url, echo=echo, future=True)

    if make_url(database_url).get_backend_name() == "sqlite":

        @event.listens_for(async_engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[arg-type]
            cursor = dbapi_connection.cursor()
            for pragma in SQLITE_PRAGMAS:
                cursor.execute(pragma)
                if pragma.startswith("PRAGMA journal_mode"):
                    cursor.fetchone()
            cursor.close()

    return async_engine


# Create async engine
engine = create_engine_for(settings.DATABASE_URL, echo=settings.DEBUG)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


async def get_db():
    """Dependency for getting database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(target: AsyncEngine | None = None):
    """Initialize database - create all tables."""
    # Register every model on Base.metadata before create_all.
    from ledgerdesk.domain.imports import models as _import_models  # noqa: F401
    from ledgerdesk.domain.tenants import models as _tenant_models  # noqa: F401
    from ledgerdesk.domain.transactions import models as _transaction_models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
