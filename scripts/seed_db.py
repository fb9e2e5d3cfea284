from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.payroll_system.payroll_system.container import build_container
from src.payroll_system.payroll_system.database.bootstrap import ensure_demo_employees


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_backend=getattr(settings, "DB_BACKEND", "mysql"),
        db_config=dict(settings.DB_CONFIG),
        sqlite_path=getattr(settings, "SQLITE_PATH", None),
    )
    added = ensure_demo_employees(container.employees_repo)
    print(f"OK: Seeded database ({added} demo employees added)")


if __name__ == "__main__":
    main()
