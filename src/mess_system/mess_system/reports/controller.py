from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, login_required, serialize
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _report_json():
        raw = request.args.get("date")
        if not raw:
            raise ValidationError("Date parameter required")
        report = container.report_service.daily_report(parse_iso_date(raw))
        return {
            "success": True,
            "report": {
                "date": report.day.strftime("%Y-%m-%d"),
                "attendance": report.attendance,
                "billing": serialize(report.billing),
                "leaves": report.leaves,
            },
        }

    @app.route("/api/admin/reports/daily", methods=["GET"], endpoint="admin_daily_report")
    @admin_required
    def admin_daily_report():
        return jsonify(_report_json())

    @app.route("/api/reports/daily", methods=["GET"], endpoint="daily_report")
    @login_required
    def daily_report():
        return jsonify(_report_json())
