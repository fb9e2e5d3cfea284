from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-entries/<int:employee_id>", methods=["GET"], endpoint="time_entries_list")
    def time_entries_list(employee_id: int):
        entries = container.time_entry_service.list_for_employee(
            employee_id,
            start=parse_optional_date(request.args.get("startDate")),
            end=parse_optional_date(request.args.get("endDate")),
        )
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/time-entries", methods=["POST"], endpoint="time_entries_create")
    def time_entries_create():
        data = request.get_json(silent=True) or {}
        entry = container.time_entry_service.create_entry(
            employee_id=data.get("employeeId"),
            work_date=data.get("date"),
            hours_worked=data.get("hoursWorked"),
            overtime_hours=data.get("overtimeHours"),
            status=data.get("status"),
        )
        return jsonify(entry.to_dict()), 201

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="time_entries_update")
    def time_entries_update(entry_id: int):
        data = request.get_json(silent=True) or {}
        return jsonify(container.time_entry_service.update_entry(entry_id, data).to_dict())

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="time_entries_delete")
    def time_entries_delete(entry_id: int):
        container.time_entry_service.delete_entry(entry_id)
        return jsonify({"message": "Time entry deleted successfully"})

    @app.route("/api/time-entries/bulk", methods=["POST"], endpoint="time_entries_bulk")
    def time_entries_bulk():
        data = request.get_json(silent=True) or {}
        items = data.get("entries")
        if not isinstance(items, list):
            raise ValidationError("entries must be an array")

        logger.info("Creating %d time entries in bulk", len(items))
        success, errors = container.time_entry_service.bulk_create(items)
        return jsonify({"success": [e.to_dict() for e in success], "errors": errors}), 207
