from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    def employees_list():
        return jsonify([e.to_dict() for e in container.employee_service.list_employees()])

    @app.route("/api/employees/<code>", methods=["GET"], endpoint="employees_get")
    def employees_get(code: str):
        return jsonify(container.employee_service.get_by_code(code).to_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    def employees_create():
        data = request.get_json(silent=True) or {}
        employee = container.employee_service.create_employee(
            code=data.get("code", ""),
            name=data.get("name", ""),
            job_title=data.get("jobTitle"),
            basic_salary=data.get("basicSalary"),
            monthly_incentives=data.get("monthlyIncentives"),
            work_days=data.get("workDays"),
            daily_work_hours=data.get("dailyWorkHours"),
        )
        return jsonify(employee.to_dict()), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    def employees_update(employee_id: int):
        data = request.get_json(silent=True) or {}
        employee = container.employee_service.update_employee(employee_id, data)
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>/time-entries", methods=["GET"], endpoint="employees_time_entries")
    def employees_time_entries(employee_id: int):
        entries = container.time_entry_service.list_for_employee(
            employee_id,
            start=parse_optional_date(request.args.get("startDate")),
            end=parse_optional_date(request.args.get("endDate")),
        )
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/employees/<int:employee_id>/advances", methods=["GET"], endpoint="employees_advances")
    def employees_advances(employee_id: int):
        return jsonify([a.to_dict() for a in container.advance_service.list_for_employee(employee_id)])

    @app.route("/api/employees/<int:employee_id>/salary-reports", methods=["GET"], endpoint="employees_salary_reports")
    def employees_salary_reports(employee_id: int):
        return jsonify([r.to_dict() for r in container.salary_report_service.list_for_employee(employee_id)])
