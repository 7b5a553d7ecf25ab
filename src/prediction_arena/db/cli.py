"""CLI entry points for the database: Alembic migrations and admin tasks."""
import argparse
import subprocess
import sys
from pathlib import Path

from prediction_arena.core.errors import ArenaError
from prediction_arena.utils import configure_logging

# Project root: .../src/prediction_arena/db/cli.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _run_alembic(*args: str) -> None:
    """Run alembic from the project root."""
    subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=_PROJECT_ROOT,
        check=True,
    )


def generate() -> None:
    """Run alembic revision --autogenerate. Pass -m "message" for the revision message."""
    _run_alembic("revision", "--autogenerate", *sys.argv[1:])


def migrate() -> None:
    """Run alembic upgrade head. Pass a revision as first arg to upgrade to that instead."""
    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    _run_alembic("upgrade", revision, *sys.argv[2:])


def main(argv: list[str] | None = None) -> int:
    """prediction-arena-db {init,seed,promote EMAIL}."""
    from prediction_arena.container import init_container
    from prediction_arena.db.sessions import init_db
    from prediction_arena.services.seed import seed_demo_data

    parser = argparse.ArgumentParser(description="Prediction arena database tasks.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="Create missing tables")
    sub.add_parser("seed", help="Insert demo tournaments and users")
    promote = sub.add_parser("promote", help="Grant the admin role to a user")
    promote.add_argument("email")
    args = parser.parse_args(argv)

    container = init_container()
    configure_logging(container.settings().log_level)
    engine = container.engine()
    try:
        if args.command == "init":
            init_db(engine)
            print("Tables ready")
        elif args.command == "seed":
            init_db(engine)
            tournaments, users = seed_demo_data(engine, container.clock())
            print(f"Created {tournaments} tournaments and {users} users")
        else:
            user = container.accounts().promote(args.email)
            print(f"User {user.id} ({user.email}) is now an admin")
    except ArenaError as exc:
        print(f"{exc.kind}: {exc.message}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()
    return 0
