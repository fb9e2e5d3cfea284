import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_BACKEND = os.getenv("DB_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

SQLITE_PATH = os.getenv("SQLITE_PATH", "instance/payroll.db")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

PAYROLL_DEFAULT_WORK_DAYS = int(os.getenv("PAYROLL_DEFAULT_WORK_DAYS", "30"))
PAYROLL_DAILY_WORK_HOURS = os.getenv("PAYROLL_DAILY_WORK_HOURS", "8")
PAYROLL_OVERTIME_MULTIPLIER = os.getenv("PAYROLL_OVERTIME_MULTIPLIER", "1.5")
PAYROLL_ADVANCE_LIMIT_RATIO = os.getenv("PAYROLL_ADVANCE_LIMIT_RATIO", "0.5")
