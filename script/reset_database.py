#!/usr/bin/env python3
"""
Database Reset Script
Drop and recreate the PostgreSQL database, then run Alembic migrations.

Usage:
    python -m script.reset_database
"""

import asyncio
import subprocess
import sys

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings
from src.platform.constant.path import BASE_DIR


def _parse_db_connection(database_url: str) -> tuple[str, str]:
    """Split the URL into (server_url, db_name)"""
    server_url, db_name = database_url.rsplit('/', 1)
    return server_url, db_name


async def _drop_and_create_db(server_url: str, db_name: str) -> None:
    admin_engine = create_async_engine(f'{server_url}/postgres', isolation_level='AUTOCOMMIT')
    try:
        async with admin_engine.connect() as conn:
            await conn.execute(
                text(
                    'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
                    'WHERE datname = :db_name AND pid <> pg_backend_pid()'
                ),
                {'db_name': db_name},
            )
            await conn.execute(text(f'DROP DATABASE IF EXISTS "{db_name}"'))
            print(f"   Database '{db_name}' dropped")
            await conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"   Database '{db_name}' created")
    finally:
        await admin_engine.dispose()


def _run_alembic_migrations() -> None:
    print("   Running 'alembic upgrade head'...")
    result = subprocess.run(
        ['alembic', 'upgrade', 'head'],
        cwd=BASE_DIR,
        capture_output=True,
        text=True,
    )

    if result.returncode != 0:
        print(f'   Migration failed (return code: {result.returncode})')
        if result.stdout:
            print(f'   STDOUT: {result.stdout}')
        if result.stderr:
            print(f'   STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')

    print('   Database migrations completed')


async def main() -> None:
    server_url, db_name = _parse_db_connection(settings.DATABASE_URL_ASYNC)
    print(f'Resetting database {db_name!r} on {settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}')

    try:
        await _drop_and_create_db(server_url, db_name)
        _run_alembic_migrations()
    except Exception as e:
        print(f'Reset failed: {e}')
        sys.exit(1)

    print('Database reset completed!')


if __name__ == '__main__':
    asyncio.run(main())
