"""
Standalone maintenance script for the voting database.

Commands:
    init-db      Create any missing tables.
    reset-week   Close the current voting week and open a fresh one.
    show-week    Print the active week, its slots and the live results.

Usage:
    python scripts/manage.py init-db [--prod]
    python scripts/manage.py reset-week [--prod]
    python scripts/manage.py show-week [--prod]
"""

import sys
import os
import argparse
import asyncio
from pathlib import Path

# --- Path Setup ---
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def parse_args():
    parser = argparse.ArgumentParser(description="Voting database maintenance.")
    parser.add_argument("command", choices=["init-db", "reset-week", "show-week"])
    parser.add_argument("--prod", action="store_true", help="Run against the PRODUCTION database.")
    return parser.parse_args()


async def init_db():
    from src.session_voting_backend.database import engine as db_engine

    db_engine.create_db_engine_and_session_factory()
    try:
        await db_engine.create_tables()
        print("All tables are in place.")
    finally:
        await db_engine.dispose_db_engine()


async def reset_week():
    from src.session_voting_backend.database import engine as db_engine
    from src.session_voting_backend.services.week_service import WeekService

    db_engine.create_db_engine_and_session_factory()
    try:
        async with db_engine.AsyncSessionLocal() as session:
            try:
                week = await WeekService(db=session).reset_week()
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        print(f"New active week {week.id} with deadline {week.deadline} ({len(week.time_slots)} slots).")
    finally:
        await db_engine.dispose_db_engine()


async def show_week():
    from src.session_voting_backend.database import engine as db_engine
    from src.session_voting_backend.services.week_service import WeekService
    from src.session_voting_backend.services.vote_service import VoteService
    from src.session_voting_backend.services.results_service import ResultsService

    db_engine.create_db_engine_and_session_factory()
    try:
        async with db_engine.AsyncSessionLocal() as session:
            week_service = WeekService(db=session)
            results_service = ResultsService(
                week_service=week_service,
                vote_service=VoteService(db=session, week_service=week_service)
            )
            result = await results_service.get_current_week_results()
            # Reading may have created the first week
            await session.commit()

        print(f"Week {result.week_id} (deadline {result.deadline}), {len(result.votes)} ballot(s)")
        for stats in result.time_slots:
            marker = "*" if stats.is_winner else " "
            print(f" {marker} {stats.datetime:%a %d.%m. %H:%M}  votes={stats.vote_count}  preferred={stats.preferred_vote_count}")
    finally:
        await db_engine.dispose_db_engine()


def main():
    args = parse_args()

    if args.prod:
        print("⚠️  WARNING: You are about to run against the PRODUCTION database. ⚠️")
        confirmation = input("Are you sure you want to proceed? (y/n): ").strip().lower()
        if confirmation != 'y':
            print("Operation aborted.")
            return
        os.environ["TEST_MODE"] = "False"
    else:
        os.environ.setdefault("TEST_MODE", "True")

    commands = {
        "init-db": init_db,
        "reset-week": reset_week,
        "show-week": show_week,
    }
    asyncio.run(commands[args.command]())


if __name__ == "__main__":
    main()
