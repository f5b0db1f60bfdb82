import contextlib
import sys
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from guestlist.config.settings import settings


def create_engine(url: str):
    url = str(url)
    use_echo = settings.LOG_DB
    connect_args = {}
    engine_kwargs = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
        # aiosqlite connections are bound to the loop that opened them
        engine_kwargs["poolclass"] = NullPool
    engine = create_async_engine(
        url,
        echo=use_echo,
        future=True,  # use the sqlalchemy 2.0 classes
        connect_args=connect_args,
        **engine_kwargs,
    )
    if "sqlite" in url:
        _use_explicit_sqlite_transactions(engine)
    return engine


def _use_explicit_sqlite_transactions(engine) -> None:
    """Let SQLAlchemy own BEGIN so that SAVEPOINTs work on sqlite.

    BEGIN IMMEDIATE takes the write lock up front: concurrent writers queue on
    the busy timeout instead of failing to upgrade a shared lock.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_engine(settings.database_url)
if "pytest" in sys.modules:
    # tests always run against the dedicated test database
    engine = create_engine(settings.test_database_url)


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
