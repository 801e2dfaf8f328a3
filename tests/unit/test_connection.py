"""Unit tests for database connection error handling (src/db/connection.py)"""
import pytest
import psycopg
from unittest.mock import AsyncMock, MagicMock, patch
from psycopg_pool import PoolTimeout

from src.db import queries
from src.db.connection import Database, db
from src.exceptions import ConnectionError, QueryError


@pytest.fixture
def pool_cursor():
    cursor = AsyncMock()
    cursor.fetchall = AsyncMock(return_value=[])
    return cursor


@pytest.fixture
def pool(pool_cursor):
    """Pool whose connection() yields a connection with a mocked cursor"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = pool_cursor
    conn.cursor.return_value.__aexit__.return_value = False

    pool = MagicMock()
    pool.connection.return_value.__aenter__.return_value = conn
    pool.connection.return_value.__aexit__.return_value = False
    return pool


@pytest.fixture
def database(pool):
    database = Database("postgresql://localhost/smart_waste_test")
    database._pool = pool
    return database


@pytest.mark.asyncio
async def test_operational_error_becomes_connection_error(database):
    with pytest.raises(ConnectionError) as exc_info:
        async with database.connection():
            raise psycopg.OperationalError("server closed the connection unexpectedly")

    assert exc_info.value.status_code == 503
    assert isinstance(exc_info.value.__cause__, psycopg.OperationalError)


@pytest.mark.asyncio
async def test_pool_timeout_becomes_connection_error(database, pool):
    pool.connection.return_value.__aenter__.side_effect = PoolTimeout("couldn't get a connection after 30 sec")

    with pytest.raises(ConnectionError):
        async with database.connection():
            pass


@pytest.mark.asyncio
async def test_query_failure_becomes_query_error(database):
    with pytest.raises(QueryError) as exc_info:
        async with database.connection():
            raise psycopg.errors.UndefinedTable("relation \"pickup_requests\" does not exist")

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_other_errors_pass_through(database):
    with pytest.raises(KeyError):
        async with database.connection():
            raise KeyError("id")


@pytest.mark.asyncio
async def test_uninitialized_pool():
    with pytest.raises(RuntimeError):
        async with Database("postgresql://localhost/smart_waste_test").connection():
            pass


@pytest.mark.asyncio
async def test_query_module_surfaces_connection_error(pool, pool_cursor):
    pool_cursor.execute = AsyncMock(side_effect=psycopg.OperationalError("connection refused"))

    with patch.object(db, "_pool", pool):
        with pytest.raises(ConnectionError):
            await queries.get_user_pickup_requests("user-123")
