"""
Maintenance CLI for inspecting and repairing progression data

Usage:
    geo-elevate init-db
    geo-elevate users
    geo-elevate xp-status 30 [--date 2024-01-11]
    geo-elevate streak 30
    geo-elevate fix-streak 30
    geo-elevate facts 30 [--type flags] [--limit 10]
"""
import argparse
import json
import logging
import sys
from datetime import date
from typing import Any, Optional, Sequence

from geo_elevate import config
from geo_elevate.db import Database, queries
from geo_elevate.exceptions import GeoElevateError
from geo_elevate.gamification import (
    get_daily_xp_overview,
    get_mastery_summary,
    get_review_queue,
    get_streak_info,
    repair_streak,
    seed_achievements,
)
from geo_elevate.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _day(args: argparse.Namespace) -> date:
    return args.date or now_utc().date()


def cmd_init_db(database: Database, args: argparse.Namespace) -> None:
    database.init_schema()
    with database.connection() as conn:
        inserted = seed_achievements(conn)
    _emit({"database": database.path, "achievements_seeded": inserted})


def cmd_users(database: Database, args: argparse.Namespace) -> None:
    with database.connection() as conn:
        _emit(queries.list_users(conn, limit=args.limit))


def cmd_xp_status(database: Database, args: argparse.Namespace) -> None:
    day = _day(args)
    with database.connection() as conn:
        overview = get_daily_xp_overview(conn, args.user_id, day)
    _emit({
        "user_id": args.user_id,
        "date": day.isoformat(),
        "max_daily": config.DAILY_XP_CAP,
        "game_types": [s.model_dump(mode="json") for s in overview],
    })


def cmd_streak(database: Database, args: argparse.Namespace) -> None:
    with database.connection() as conn:
        info = get_streak_info(conn, args.user_id, _day(args))
    _emit(info.model_dump(mode="json"))


def cmd_fix_streak(database: Database, args: argparse.Namespace) -> None:
    with database.connection() as conn:
        before = queries.get_user(conn, args.user_id)
        result = repair_streak(conn, args.user_id, _day(args))
        after = queries.get_user(conn, args.user_id)
    _emit({"before": before, "after": after, "changed": result.changed})


def cmd_facts(database: Database, args: argparse.Namespace) -> None:
    with database.connection() as conn:
        queue = get_review_queue(conn, args.user_id, args.type, args.limit)
        summary = get_mastery_summary(conn, args.user_id)
    _emit({
        "user_id": args.user_id,
        "summary": [s.model_dump(mode="json") for s in summary],
        "review_queue": [f.model_dump(mode="json") for f in queue],
    })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geo-elevate",
        description="Inspect and repair geo-elevate progression data"
    )
    parser.add_argument("--db", help=f"SQLite database path (default: {config.DATABASE_PATH})")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables and seed achievements").set_defaults(func=cmd_init_db)

    p = sub.add_parser("users", help="List users")
    p.add_argument("--limit", type=int, default=10)
    p.set_defaults(func=cmd_users)

    for name, func, help_text in (
        ("xp-status", cmd_xp_status, "Daily XP per game type"),
        ("streak", cmd_streak, "Show a user's streak"),
        ("fix-streak", cmd_fix_streak, "Set streak to 1 if played today but streak reads 0"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("user_id", type=int)
        p.add_argument("--date", type=date.fromisoformat, help="UTC day (YYYY-MM-DD), default today")
        p.set_defaults(func=func)

    p = sub.add_parser("facts", help="Fact mastery summary and review queue")
    p.add_argument("user_id", type=int)
    p.add_argument("--type", help="Restrict to one fact type")
    p.add_argument("--limit", type=int, default=10)
    p.set_defaults(func=cmd_facts)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    )

    args = build_parser().parse_args(argv)

    try:
        config.validate_config()
        database = Database(args.db) if args.db else Database()
        args.func(database, args)
    except GeoElevateError as e:
        _emit(e.to_dict())
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
