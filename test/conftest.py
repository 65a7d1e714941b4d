"""
Test Configuration and Fixtures

- Unit tests (marked `unit`) run on fakes and never open a connection
- Everything else needs PostgreSQL: the test database is rebuilt from the
  alembic migrations once per session, and tables are truncated before
  each test. When the server cannot be reached those tests are skipped.
"""

# Settings reads the environment at import time, so this runs before any
# application module is imported
import os
from pathlib import Path


os.environ['POSTGRES_DB'] = os.environ.get('TEST_POSTGRES_DB', 'ticket_reservation_test_db')
os.environ.setdefault('DB_POOL_SIZE', '5')
os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '15')
os.environ.setdefault('DB_POOL_TIMEOUT', '10')

_TEST_LOG_DIR = Path(__file__).parent / 'test_log'
_TEST_LOG_DIR.mkdir(exist_ok=True)
os.environ['TEST_LOG_DIR'] = str(_TEST_LOG_DIR)

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from dotenv import load_dotenv  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine  # noqa: E402

from src.platform.constant.path import ALEMBIC_DIR, BASE_DIR  # noqa: E402


class PostgresFixture:
    """Creates, migrates and empties the throwaway test database"""

    def __init__(self) -> None:
        env_file = BASE_DIR / '.env'
        load_dotenv(env_file if env_file.exists() else BASE_DIR / '.env.example')

        user = os.getenv('POSTGRES_USER', 'postgres')
        password = os.getenv('POSTGRES_PASSWORD', 'postgres')
        host = os.getenv('POSTGRES_SERVER', 'localhost')
        port = os.getenv('POSTGRES_PORT', '5432')

        self.name = os.environ['POSTGRES_DB']
        self.server_url = f'postgresql+asyncpg://{user}:{password}@{host}:{port}'
        self.url = f'{self.server_url}/{self.name}'
        self.available = False
        self._tables: list[str] = []

    def _engine(self, url: str, **kwargs) -> AsyncEngine:
        return create_async_engine(url, connect_args={'timeout': 3}, **kwargs)

    async def _recreate_schema(self) -> None:
        admin = self._engine(f'{self.server_url}/postgres', isolation_level='AUTOCOMMIT')
        try:
            async with admin.connect() as conn:
                exists = await conn.scalar(
                    text('SELECT 1 FROM pg_database WHERE datname = :name'), {'name': self.name}
                )
                if not exists:
                    await conn.execute(text(f'CREATE DATABASE "{self.name}"'))
        finally:
            await admin.dispose()

        engine = self._engine(self.url)
        try:
            async with engine.begin() as conn:
                await conn.execute(text('DROP SCHEMA public CASCADE'))
                await conn.execute(text('CREATE SCHEMA public'))
        finally:
            await engine.dispose()

    def _migrate(self) -> None:
        # env.py starts its own event loop
        cfg = Config(str(BASE_DIR / 'alembic.ini'))
        cfg.set_main_option('script_location', str(ALEMBIC_DIR))
        command.upgrade(cfg, 'head')

    def prepare(self) -> None:
        try:
            asyncio.run(self._recreate_schema())
        except (OSError, SQLAlchemyError) as e:
            print(f'\nPostgreSQL unavailable, database tests will be skipped: {e}')
            return
        self._migrate()
        self.available = True

    async def truncate_all(self) -> None:
        engine = self._engine(self.url)
        try:
            async with engine.begin() as conn:
                if not self._tables:
                    rows = await conn.execute(
                        text(
                            "SELECT tablename FROM pg_tables WHERE schemaname = 'public' "
                            "AND tablename != 'alembic_version'"
                        )
                    )
                    self._tables = [f'"{row[0]}"' for row in rows]
                await conn.execute(
                    text(f'TRUNCATE {", ".join(self._tables)} RESTART IDENTITY CASCADE')
                )
        finally:
            await engine.dispose()


test_database = PostgresFixture()


def _only_unit_tests_selected(config: pytest.Config) -> bool:
    markexpr = str(config.getoption('markexpr', default='') or '')
    if markexpr.strip() == 'unit':
        return True
    paths = [arg for arg in config.args or [] if arg and not arg.startswith('-')]
    return bool(paths) and all(f'{os.sep}unit{os.sep}' in path or '/unit/' in path for path in paths)


def _is_unit(item: pytest.Item) -> bool:
    return item.get_closest_marker('unit') is not None


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_sessionstart(session: pytest.Session) -> None:
    if not _only_unit_tests_selected(session.config):
        test_database.prepare()


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    skip = pytest.mark.skip(reason='PostgreSQL is not reachable')
    for item in items:
        if _is_unit(item):
            continue
        if test_database.available:
            item.fixturenames.append('clean_database')
        else:
            item.add_marker(skip)


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
async def clean_database() -> AsyncGenerator[None, None]:
    from src.platform.database.orm_db_setting import _engine_manager, dispose_engine

    await test_database.truncate_all()
    yield

    # An engine created on this test's loop dies with it; one owned by the
    # TestClient loop stays with that loop
    if _engine_manager._loop is asyncio.get_running_loop():
        await dispose_engine()


@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_client_cookies(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    if _is_unit(request.node) or not test_database.available:
        yield
        return
    test_client = request.getfixturevalue('client')
    test_client.cookies.clear()
    yield
    test_client.cookies.clear()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Authorization header for an arbitrary identity, no login round trip"""
    from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
    from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth

    jwt_auth = JwtAuth()

    def _headers(*, user_id: int, role: UserRole, email: str = 'user@test.com') -> dict[str, str]:
        user = UserEntity(id=user_id, email=email, role=role, is_active=True)
        return {'Authorization': f'Bearer {jwt_auth.create_jwt_token(user)}'}

    return _headers
