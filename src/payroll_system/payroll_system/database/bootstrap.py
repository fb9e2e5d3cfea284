from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable

import mysql.connector

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = (
    {"code": "EMP001", "name": "Ahmed Hassan", "job_title": "Accountant", "basic_salary": Decimal("6000"), "monthly_incentives": Decimal("0")},
    {"code": "EMP002", "name": "Mona Adel", "job_title": "Sales", "basic_salary": Decimal("4500"), "monthly_incentives": Decimal("500")},
    {"code": "EMP003", "name": "Karim Nabil", "job_title": "Storekeeper", "basic_salary": Decimal("3800"), "monthly_incentives": Decimal("0")},
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "payroll_db")),
    )


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]

    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _mysql_connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _mysql_connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _mysql_connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied MySQL schema to %s@%s/%s", target.user, target.host, target.database)


def apply_sqlite_schema(sqlite_path: str | Path, *, schema_path: str | Path) -> None:
    sqlite_path = Path(sqlite_path)
    sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(sqlite_path))
    try:
        conn.executescript(Path(schema_path).read_text(encoding="utf-8"))
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied SQLite schema to %s", sqlite_path)


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _mysql_connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def list_sqlite_tables(sqlite_path: str | Path) -> list[str]:
    conn = sqlite3.connect(str(sqlite_path))
    try:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        ).fetchall()
        return [row[0] for row in rows]
    finally:
        conn.close()


def ensure_demo_employees(employees) -> int:
    """Create the demo employees that are missing. Returns how many were added."""

    added = 0
    for data in DEMO_EMPLOYEES:
        if employees.get_by_code(data["code"]):
            continue
        employees.create(
            code=data["code"],
            name=data["name"],
            job_title=data["job_title"],
            basic_salary=data["basic_salary"],
            monthly_incentives=data["monthly_incentives"],
            work_days=None,
            daily_work_hours=Decimal("8"),
        )
        added += 1
    if added:
        logger.info("Seeded %d demo employees", added)
    return added
