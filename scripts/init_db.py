from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geo_attendance.geo_attendance.database.bootstrap import apply_schema, apply_seed_sql, list_tables
from src.geo_attendance.geo_attendance.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql (and optionally seed.sql).")
    parser.add_argument("--seed", action="store_true", help="also load the demo organization and boundary")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(settings.DB_CONFIG))

    apply_schema(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    if args.seed:
        apply_seed_sql(conn, seed_path=REPO_ROOT / "database" / "seed.sql")

    cfg = conn.config
    print(f"OK: schema applied -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (tables={len(list_tables(conn))})")


if __name__ == "__main__":
    main()
