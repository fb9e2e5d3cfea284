"""Example: use the service layer directly (no Flask).

Controllers are thin; the payroll rules live in the services and the calculator.
"""

import importlib

from config import get_settings_module

from src.payroll_system.payroll_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_backend=getattr(settings, "DB_BACKEND", "mysql"),
        db_config=settings.DB_CONFIG,
        sqlite_path=getattr(settings, "SQLITE_PATH", None),
    )
    preview = container.salary_report_service.preview(
        {"basicSalary": 6000, "workDays": 30, "overtimeHours": 10, "absenceDays": 2, "deductionsPurchases": 100}
    )
    print(preview.to_dict())


if __name__ == "__main__":
    main()
