"""Create the attendance database and apply database/schema.sql.

Usage: python scripts/init_db.py [--seed]

``--seed`` also loads database/seed.sql and upserts the demo employees.
Safe to re-run: the schema only uses CREATE ... IF NOT EXISTS.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_tracker.database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply the attendance schema to the configured MySQL database.")
    parser.add_argument("--seed", action="store_true", help="also load seed.sql and the demo employees")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    print(f"schema applied to {target}: {', '.join(sorted(list_tables(db_config)))}")

    if args.seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_employees(db_config)
        print(f"seeded employees into {target}")


if __name__ == "__main__":
    main()
