from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _month_arg() -> Optional[str]:
    """``?month=YYYY-MM`` or the older ``?month=M&year=YYYY`` pair."""

    month = (request.args.get("month") or "").strip()
    year = (request.args.get("year") or "").strip()
    if not month:
        return None
    if year and month.isdigit():
        return parse_month(f"{year}-{int(month):02d}")
    return parse_month(month)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/advances/pending", methods=["GET"], endpoint="advances_pending")
    def advances_pending():
        return jsonify([a.to_dict() for a in container.advance_service.list_pending()])

    @app.route("/api/advances/<int:employee_id>", methods=["GET"], endpoint="advances_for_employee")
    def advances_for_employee(employee_id: int):
        return jsonify([a.to_dict() for a in container.advance_service.list_for_employee(employee_id)])

    @app.route("/api/advances/<int:employee_id>/summary", methods=["GET"], endpoint="advances_summary")
    def advances_summary(employee_id: int):
        summary = container.advance_service.summary(employee_id, month=_month_arg())
        return jsonify(summary.to_dict())

    @app.route("/api/advances", methods=["POST"], endpoint="advances_create")
    def advances_create():
        data = request.get_json(silent=True) or {}
        advance = container.advance_service.create_advance(
            employee_id=container.employee_service.resolve(
                employee_id=data.get("employeeId"), employee_code=data.get("employeeCode")
            ).employee_id,
            amount=data.get("amount"),
            issue_date=data.get("date"),
            notes=data.get("notes"),
        )
        return jsonify(advance.to_dict()), 201

    @app.route("/api/advances/<int:advance_id>", methods=["PUT"], endpoint="advances_mark_paid")
    def advances_mark_paid(advance_id: int):
        data = request.get_json(silent=True) or {}
        if data.get("isPaid", True) is not True:
            raise ValidationError("Only marking an advance as paid is supported")
        return jsonify(container.advance_service.mark_paid(advance_id).to_dict())

    @app.route("/api/advances/bulk/paid", methods=["PUT"], endpoint="advances_bulk_paid")
    def advances_bulk_paid():
        data = request.get_json(silent=True) or {}
        advance_ids = data.get("advanceIds")
        if not isinstance(advance_ids, list):
            raise ValidationError("advanceIds must be an array")

        logger.info("Bulk marking %d advances as paid", len(advance_ids))
        success, errors = container.advance_service.bulk_mark_paid(advance_ids)
        return jsonify({"success": [a.to_dict() for a in success], "errors": errors}), 207
