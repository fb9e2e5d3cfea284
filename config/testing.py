import os

SECRET_KEY = "test-secret"

DB_BACKEND = os.getenv("DB_BACKEND", "sqlite")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_test"),
}

SQLITE_PATH = os.getenv("SQLITE_PATH", "instance/payroll_test.db")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

PAYROLL_DEFAULT_WORK_DAYS = 30
PAYROLL_DAILY_WORK_HOURS = "8"
PAYROLL_OVERTIME_MULTIPLIER = "1.5"
PAYROLL_ADVANCE_LIMIT_RATIO = "0.5"
