"""Ratings database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the ratings schema, including the unique rating-per-report index."""
    from ratings.domain import ratings
    from ratings.utils.db import setup_db

    print("Initializing ratings domain...")
    ratings.init()
    print("Creating ratings database schema...")
    setup_db(ratings)
    print("Done.")


def drop_databases():
    """Drop the ratings schema."""
    from ratings.domain import ratings
    from ratings.utils.db import drop_db

    print("Initializing ratings domain...")
    ratings.init()
    print("Dropping ratings database schema...")
    drop_db(ratings)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Verified Ratings database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
