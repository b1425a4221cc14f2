"""Rewrite stored legacy hidden-view lists in the current view settings format.

Usage (from the project root):
python scripts/migrate_legacy_settings.py --app-id 42
python scripts/migrate_legacy_settings.py --all --dry-run

Reading already migrates legacy settings on the fly; this script makes the
migration permanent so the legacy key disappears from the store.
"""

import argparse
import logging
import os
import sys

# Ensure src is on path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from viewgate.db import SessionLocal  # noqa: E402
from viewgate.db.init_db import init_db  # noqa: E402
from viewgate.services.config_store import list_app_ids, migrate_legacy_config  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Migrate legacy hidden-view settings to the current format")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--app-id", action="append", dest="app_ids", help="App to migrate (repeatable)")
    target.add_argument("--all", action="store_true", help="Migrate every app found in the store")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    init_db()

    db = SessionLocal()
    try:
        app_ids = list_app_ids(db) if args.all else args.app_ids
        migrated = [app_id for app_id in app_ids if migrate_legacy_config(db, app_id, dry_run=args.dry_run)]
    finally:
        db.close()

    verb = "Would migrate" if args.dry_run else "Migrated"
    print(f"{verb} {len(migrated)} of {len(app_ids)} app(s): {', '.join(migrated) or '-'}")


if __name__ == "__main__":
    main()
