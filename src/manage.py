"""Storefront database management CLI.

Creates and drops the catalog store tables and the payments domain tables.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db --target catalog # Drop only the catalog tables
"""

import argparse
import sys

TARGETS = ["catalog", "payments"]


def setup_databases(targets=None):
    """Create schemas for the specified (or all) targets."""
    targets = targets or TARGETS

    if "catalog" in targets:
        from catalogue.utils.db import setup_db as setup_catalog_db

        print("Creating catalog schema...")
        if setup_catalog_db():
            print("  catalog schema ready.")
        else:
            print("  CATALOG_DATABASE_URI is not set; the in-memory store needs no schema.")

    if "payments" in targets:
        from payments.domain import payments
        from payments.utils.db import setup_db as setup_payments_db

        print("Initializing payments domain...")
        payments.init()
        print("Creating payments schema...")
        touched = setup_payments_db(payments)
        print(f"  payments schema ready ({touched} SQL provider(s)).")

    print("Done.")


def drop_databases(targets=None):
    """Drop schemas for the specified (or all) targets."""
    targets = targets or TARGETS

    if "catalog" in targets:
        from catalogue.utils.db import drop_db as drop_catalog_db

        print("Dropping catalog schema...")
        if drop_catalog_db():
            print("  catalog schema dropped.")
        else:
            print("  CATALOG_DATABASE_URI is not set; nothing to drop.")

    if "payments" in targets:
        from payments.domain import payments
        from payments.utils.db import drop_db as drop_payments_db

        print("Initializing payments domain...")
        payments.init()
        print("Dropping payments schema...")
        touched = drop_payments_db(payments)
        print(f"  payments schema dropped ({touched} SQL provider(s)).")

    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--target",
        choices=TARGETS,
        nargs="*",
        help="Specific store(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--target",
        choices=TARGETS,
        nargs="*",
        help="Specific store(s) to drop (default: all)",
    )

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.target)
    elif args.command == "drop-db":
        drop_databases(args.target)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
