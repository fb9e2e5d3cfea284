from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.payroll_system.payroll_system.database.bootstrap import (
    apply_schema,
    apply_sqlite_schema,
    list_sqlite_tables,
    list_tables,
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "DB_BACKEND", "mysql")).lower()

    if backend == "sqlite":
        sqlite_path = Path(settings.SQLITE_PATH)
        apply_sqlite_schema(sqlite_path, schema_path=REPO_ROOT / "database" / "schema_sqlite.sql")
        print(f"OK: Applied schema_sqlite.sql -> {sqlite_path} (tables={len(list_sqlite_tables(sqlite_path))})")
        return

    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
