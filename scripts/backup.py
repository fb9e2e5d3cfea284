"""Backup the configured database.

MySQL backups use `mysqldump` (MySQL client tools must be installed);
SQLite backups copy the database file through the sqlite3 backup API.
"""

from __future__ import annotations

import importlib
import sqlite3
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module


def backup_sqlite(source: Path, out_file: Path) -> None:
    src = sqlite3.connect(str(source))
    dst = sqlite3.connect(str(out_file))
    try:
        src.backup(dst)
    finally:
        dst.close()
        src.close()


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "DB_BACKEND", "mysql")).lower()

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if backend == "sqlite":
        source = Path(settings.SQLITE_PATH)
        if not source.exists():
            raise SystemExit(f"SQLite database not found: {source}")
        out_file = out_dir / f"payroll_{ts}.db"
        backup_sqlite(source, out_file)
        print(f"OK: Backup created: {out_file}")
        return

    db = settings.DB_CONFIG
    out_file = out_dir / f"{db['database']}_{ts}.sql"
    cmd = [
        "mysqldump",
        f"-h{db['host']}",
        f"-P{db.get('port', 3306)}",
        f"-u{db['user']}",
        f"-p{db['password']}",
        db["database"],
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
        print(f"OK: Backup created: {out_file}")
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools or back up with MySQL Workbench.")


if __name__ == "__main__":
    main()
