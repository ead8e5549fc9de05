# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL, no mocks.

A session-scoped container provides a real PostgreSQL instance migrated to
head.  The arbitration guarantees live in SQL (unique lock row, partial
unique pending index, conditional UPDATEs), so concurrency tests open one
session per competitor and commit for real; ``registry`` truncates every
table afterwards.
"""

import os
from collections import namedtuple

import pytest
import pytest_asyncio
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

# ---------------------------------------------------------------------------
# Mark all tests in this directory as integration
# ---------------------------------------------------------------------------
pytestmark = pytest.mark.integration

_ALL_TABLES = (
    "notifications, audit_events, credit_transactions, search_logs, unlock_requests, "
    "lock_history, record_locks, negative_records, users, clients, demo_data_manifest"
)

_DB_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


# ---------------------------------------------------------------------------
# Session-scoped: container + engine + migrations
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container():
    """Start postgres:16 via testcontainers."""
    with PostgresContainer(
        image="postgres:16",
        username="test",
        password="test",
        dbname="test",
    ) as pg:
        yield pg


@pytest.fixture(scope="session")
def db_url(pg_container):
    """Async DB URL for asyncpg."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def sync_db_url(pg_container):
    """Sync DB URL for Alembic (psycopg2)."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql://test:test@{host}:{port}/test"


@pytest.fixture(scope="session", autouse=True)
def _run_migrations(sync_db_url):
    """Run alembic upgrade head against the container."""
    os.environ["DATABASE_URL"] = sync_db_url
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(os.path.join(_DB_DIR, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_DIR, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_db_url)
    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def async_engine(db_url, _run_migrations):
    """Create an async engine pointing at the test container."""
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    yield engine


@pytest.fixture(scope="session")
def session_factory(async_engine):
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture(scope="session", autouse=True)
def _patch_db_module(async_engine, session_factory):
    """Point db.database globals, and modules that imported them by name, at the container.

    ``src.services.effects`` and ``src.seed`` bind ``SessionLocal`` at import
    time, which happens during collection before any fixture runs.
    """
    import db.database as db_mod

    db_mod.engine = async_engine
    db_mod.SessionLocal = session_factory
    db_mod.db_service = db_mod.DatabaseService(engine=async_engine)

    import db as db_pkg

    import src.seed as seed_mod
    import src.services.effects as effects_mod

    for mod in (db_pkg, seed_mod, effects_mod):
        mod.SessionLocal = session_factory


# ---------------------------------------------------------------------------
# Function-scoped: per-test session with savepoint rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(async_engine):
    """Per-test DB session with savepoint rollback."""
    conn = await async_engine.connect()
    txn = await conn.begin()
    session = AsyncSession(bind=conn, join_transaction_mode="create_savepoint")
    yield session
    await session.close()
    await txn.rollback()
    await conn.close()


# ---------------------------------------------------------------------------
# Committed registry for tests where every competitor opens its own session
# ---------------------------------------------------------------------------

Registry = namedtuple(
    "Registry",
    ["alpha", "beta", "gamma", "admin", "super_admin", "maria", "jose", "ana", "juan", "pedro"],
)


@pytest_asyncio.fixture
async def truncate_all(async_engine):
    """Yield-based: truncates all tables after the test completes.

    TRUNCATE bypasses the append-only row triggers.
    """
    yield
    async with async_engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE TABLE {_ALL_TABLES} RESTART IDENTITY CASCADE"))


@pytest_asyncio.fixture
async def registry(session_factory, truncate_all) -> Registry:
    """Seed the demo fixtures and return the ids tests refer to."""
    from db import Client, NegativeRecord, User

    from src.services.seed.fixtures import (
        ADMIN_ID,
        ALPHA_AFFILIATE_ID,
        BETA_AFFILIATE_ID,
        GAMMA_AFFILIATE_ID,
        SUPER_ADMIN_ID,
    )
    from src.services.seed.seeder import seed_demo_data

    async with session_factory() as session:
        await seed_demo_data(session)

        clients = dict((await session.execute(select(Client.client_code, Client.id))).all())
        users = dict((await session.execute(select(User.keycloak_user_id, User.id))).all())
        records = dict(
            (await session.execute(select(NegativeRecord.last_name, NegativeRecord.id))).all()
        )

    return Registry(
        alpha=clients["ALPHA"],
        beta=clients["BETA"],
        gamma=clients["GAMMA"],
        admin=users[ADMIN_ID],
        super_admin=users[SUPER_ADMIN_ID],
        maria=users[ALPHA_AFFILIATE_ID],
        jose=users[BETA_AFFILIATE_ID],
        ana=users[GAMMA_AFFILIATE_ID],
        juan=records["Dela Cruz"],
        pedro=records["Garcia"],
    )
