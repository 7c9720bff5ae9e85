"""Storefront database management CLI.

Creates and drops the SQL schema behind the Checkout domain (orders and
stock reservations). The Storefront domain keeps carts and wishlists in
client storage and owns no tables.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

DOMAINS = ["checkout"]


def _domains(names=None):
    from checkout.domain import checkout

    registered = {"checkout": checkout}
    return {name: registered[name] for name in (names or DOMAINS)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from checkout.utils.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from checkout.utils.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        subparser = subparsers.add_parser(command, help=help_text)
        subparser.add_argument(
            "--domain",
            choices=DOMAINS,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
