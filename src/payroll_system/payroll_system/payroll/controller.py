from __future__ import annotations

import csv
import io
import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..container import Container
from ..core.exceptions import ValidationError
from .service import EXPORT_FIELDS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/salary/preview", methods=["POST"], endpoint="salary_preview")
    def salary_preview():
        data = request.get_json(silent=True) or {}
        return jsonify(container.salary_report_service.preview(data).to_dict())

    @app.route("/api/salary-reports", methods=["POST"], endpoint="salary_reports_generate")
    def salary_reports_generate():
        data = request.get_json(silent=True) or {}
        logger.info("Generating salary report for %s %s", data.get("employeeCode"), data.get("month"))
        generated = container.salary_report_service.generate(data)
        return jsonify(generated.to_dict()), 201

    @app.route("/api/salary-reports/bulk", methods=["POST"], endpoint="salary_reports_bulk")
    def salary_reports_bulk():
        data = request.get_json(silent=True) or {}
        codes = data.get("employeeCodes")
        if codes is not None and not isinstance(codes, list):
            raise ValidationError("employeeCodes must be an array")

        defaults = {k: v for k, v in data.items() if k not in ("employeeCodes", "month")}
        success, errors = container.salary_report_service.bulk_generate(data.get("month"), codes, defaults)
        return jsonify({"success": [g.to_dict() for g in success], "errors": errors}), 207

    @app.route("/api/salary-reports/<int:employee_id>", methods=["GET"], endpoint="salary_reports_for_employee")
    def salary_reports_for_employee(employee_id: int):
        return jsonify([r.to_dict() for r in container.salary_report_service.list_for_employee(employee_id)])

    @app.route("/api/salary-reports/report/<int:report_id>", methods=["GET"], endpoint="salary_reports_get")
    def salary_reports_get(report_id: int):
        return jsonify(container.salary_report_service.get_by_id(report_id).to_dict())

    @app.route(
        "/api/salary-reports/report/<int:report_id>/amortize",
        methods=["POST"],
        endpoint="salary_reports_amortize",
    )
    def salary_reports_amortize(report_id: int):
        result = container.salary_report_service.apply_advance_deductions(report_id)
        return jsonify(result.to_dict())

    @app.route("/api/salary-reports/summary/<month>", methods=["GET"], endpoint="salary_reports_summary")
    def salary_reports_summary(month: str):
        return jsonify(container.salary_report_service.monthly_summary(month).to_dict())

    @app.route("/api/salary-reports/export/<month>.csv", methods=["GET"], endpoint="salary_reports_export")
    def salary_reports_export(month: str):
        month = parse_month(month)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in container.salary_report_service.export_rows(month):
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=salary_reports_{month}.csv"},
        )
