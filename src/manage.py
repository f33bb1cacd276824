"""Storefront database management CLI.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from storefront.domain import storefront
from storefront.utils.db import drop_db, setup_db
from storefront.utils.logging import configure_logging


def setup_database():
    print(f"Initializing {storefront.name} domain...")
    storefront.init()
    print("Creating database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    print(f"Initializing {storefront.name} domain...")
    storefront.init()
    print("Dropping database schema...")
    drop_db(storefront)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
