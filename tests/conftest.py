"""Global test fixtures and utilities for geo-elevate tests"""
import pytest
from datetime import datetime, timezone

from geo_elevate.db import Database, queries


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def database(tmp_path):
    """Fresh on-disk SQLite database with the schema installed"""
    db = Database(tmp_path / "geoelevate.db", timeout=0.1)
    db.init_schema()
    return db


@pytest.fixture
def conn(database):
    """Scoped connection to the test database"""
    with database.connection() as connection:
        yield connection


@pytest.fixture
def reader(database):
    """Second connection holding a read lock, so writers cannot COMMIT"""
    connection = database.connect()
    connection.execute("BEGIN")
    connection.execute("SELECT * FROM users").fetchall()
    yield connection
    if connection.in_transaction:
        connection.execute("ROLLBACK")
    connection.close()


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def make_user(conn):
    """Factory creating users with optional progression state"""
    counter = {"n": 0}

    def _make(
        current_streak: int = 0,
        longest_streak: int = 0,
        last_played_date=None,
        overall_xp: int = 0
    ) -> int:
        counter["n"] += 1
        user_id = queries.create_user(conn, f"player{counter['n']}", f"player{counter['n']}@example.com")
        conn.execute(
            """
            UPDATE users
            SET current_streak = ?, longest_streak = ?, last_played_date = ?,
                overall_xp = ?, overall_level = ? / 1000 + 1
            WHERE id = ?
            """,
            (
                current_streak,
                longest_streak,
                last_played_date.isoformat() if last_played_date else None,
                overall_xp,
                overall_xp,
                user_id,
            ),
        )
        return user_id

    return _make


@pytest.fixture
def user_id(make_user):
    """Standard test user with no history"""
    return make_user()


@pytest.fixture
def noon():
    """Fixed 'now' for deterministic tests"""
    return datetime(2024, 1, 11, 12, 0, 0, tzinfo=timezone.utc)
