"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db                  # create every storefront table
    python src/manage.py drop-db --env production  # drop them from PostgreSQL

``--env`` sets ``PROTEAN_ENV`` before the domain is initialised, so the
matching overlay in ``storefront/domain.toml`` decides which database is used.
"""

import argparse
import os

from storefront.utils.db import drop_db, setup_db

ACTIONS = {
    "setup-db": ("Creating", setup_db),
    "drop-db": ("Dropping", drop_db),
}


def run(command):
    # Imported late so PROTEAN_ENV is in place before the domain loads its config
    from storefront.domain import storefront

    verb, action = ACTIONS[command]
    storefront.init()
    print(f"{verb} storefront schema ({os.environ.get('PROTEAN_ENV', 'default')})...")
    action(storefront)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    parser.add_argument("command", choices=sorted(ACTIONS), help="Schema operation to run")
    parser.add_argument("--env", help="Config environment (sets PROTEAN_ENV)")

    args = parser.parse_args()
    if args.env:
        os.environ["PROTEAN_ENV"] = args.env

    run(args.command)


if __name__ == "__main__":
    main()
