"""Create the schema, optionally with the demo accounts.

    APP_ENV=development python scripts/init_db.py [--seed]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.staff_attendance.staff_attendance.database.bootstrap import apply_schema, ensure_demo_users, list_tables


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="create/reset admin@example.com and staff@example.com")
    args = parser.parse_args(argv)

    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    print(f"OK: schema applied to {target} ({settings_module}), tables: {', '.join(list_tables(db_config))}")

    if args.seed:
        ensure_demo_users(db_config)
        print("OK: demo users  admin@example.com / admin123  staff@example.com / staff123")


if __name__ == "__main__":
    main()
