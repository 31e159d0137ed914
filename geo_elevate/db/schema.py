"""SQLite schema for progression data

Safe to call multiple times (CREATE ... IF NOT EXISTS).
"""

import logging
import sqlite3

logger = logging.getLogger(__name__)

GAME_TYPES_SQL = "('flags', 'capitals', 'maps', 'languages', 'trivia')"

TABLES = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT UNIQUE,
        username TEXT UNIQUE NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        overall_xp INTEGER DEFAULT 0,
        overall_level INTEGER DEFAULT 1,
        current_streak INTEGER DEFAULT 0,
        longest_streak INTEGER DEFAULT 0,
        last_played_date DATE
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS user_category_stats (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        category TEXT NOT NULL CHECK(category IN {GAME_TYPES_SQL}),
        xp INTEGER DEFAULT 0,
        games_played INTEGER DEFAULT 0,
        total_correct INTEGER DEFAULT 0,
        total_questions INTEGER DEFAULT 0,
        high_score INTEGER DEFAULT 0,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
        UNIQUE(user_id, category)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS user_fact_progress (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        fact_type TEXT NOT NULL CHECK(fact_type IN {GAME_TYPES_SQL}),
        fact_id INTEGER NOT NULL,
        times_seen INTEGER DEFAULT 0,
        times_correct INTEGER DEFAULT 0,
        times_wrong INTEGER DEFAULT 0,
        last_seen_at DATETIME,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
        UNIQUE(user_id, fact_type, fact_id)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS game_sessions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        game_type TEXT NOT NULL CHECK(game_type IN {GAME_TYPES_SQL}),
        game_mode TEXT DEFAULT 'solo',
        difficulty_level TEXT DEFAULT 'medium',
        region_filter TEXT,
        score INTEGER DEFAULT 0,
        correct_count INTEGER DEFAULT 0,
        total_questions INTEGER DEFAULT 10,
        xp_earned INTEGER DEFAULT 0,
        completed_at DATETIME NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS achievements (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        description TEXT NOT NULL,
        icon TEXT DEFAULT 'trophy',
        category TEXT NOT NULL,
        requirement_type TEXT NOT NULL,
        requirement_value INTEGER NOT NULL,
        xp_reward INTEGER DEFAULT 100
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_achievements (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        achievement_id INTEGER NOT NULL,
        progress INTEGER DEFAULT 0,
        unlocked_at DATETIME,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY (achievement_id) REFERENCES achievements(id) ON DELETE CASCADE,
        UNIQUE(user_id, achievement_id)
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_game_sessions_user_type_day "
    "ON game_sessions(user_id, game_type, completed_at)",
    "CREATE INDEX IF NOT EXISTS idx_user_fact_progress_user ON user_fact_progress(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_user_category_stats_user ON user_category_stats(user_id)",
]


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes"""
    for statement in TABLES + INDEXES:
        conn.execute(statement)
    logger.info(f"Schema ready ({len(TABLES)} tables)")
