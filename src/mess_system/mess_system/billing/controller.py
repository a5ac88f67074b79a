from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import month_end, parse_billing_month
from ..common.http import admin_required, current_user_id, json_body, login_required, serialize
from ..common.validators import parse_bool, parse_id
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/billing/summary", methods=["GET"], endpoint="billing_summary")
    @login_required
    def billing_summary():
        month = request.args.get("date")
        if month:
            start = parse_billing_month(month)
            end = month_end(start)
        elif request.args.get("start") and request.args.get("end"):
            start, end = request.args["start"], request.args["end"]
        else:
            raise ValidationError("Date or start/end dates required")

        summary = container.attendance_service.summary(user_id=current_user_id(), start_date=start, end_date=end)
        return jsonify(
            {
                "summary": {
                    "attended": summary.attended,
                    "skipped": summary.skipped,
                    "leave": summary.on_leave,
                    "estimatedAmount": summary.estimated_amount,
                }
            }
        )

    @app.route("/api/billing/history", methods=["GET"], endpoint="billing_history")
    @login_required
    def billing_history():
        records = container.billing_service.history(user_id=current_user_id())
        return jsonify({"records": serialize(records)})

    @app.route("/api/admin/billing", methods=["GET"], endpoint="admin_billing_list")
    @admin_required
    def admin_billing_list():
        return jsonify({"records": serialize(container.billing_service.list_all())})

    @app.route("/api/admin/billing/summary", methods=["GET"], endpoint="admin_billing_summary")
    @admin_required
    def admin_billing_summary():
        month = request.args.get("date") or request.args.get("month")
        if not month:
            raise ValidationError("Date parameter required")
        records = container.billing_service.month_summary(billing_month=month)
        return jsonify({"records": serialize(records)})

    @app.route("/api/admin/billing/update-payment", methods=["POST"], endpoint="admin_billing_update_payment")
    @admin_required
    def admin_billing_update_payment():
        data = json_body()
        if data.get("user_id") in (None, "") or not data.get("billing_date") or data.get("is_paid") is None:
            raise ValidationError("user_id, billing_date, and is_paid are required")

        record = container.billing_service.set_paid(
            user_id=parse_id(data["user_id"], "user id"),
            billing_month=data["billing_date"],
            is_paid=parse_bool(data["is_paid"], "is_paid"),
        )
        message = "Successfully marked as paid" if record.is_paid else "Marked as unpaid"
        return jsonify({"success": True, "message": message, "record": serialize(record)})

    @app.route("/api/admin/billing/recalculate", methods=["POST"], endpoint="admin_billing_recalculate")
    @admin_required
    def admin_billing_recalculate():
        data = json_body()
        if data.get("user_id") in (None, "") or not data.get("billing_month"):
            raise ValidationError("user_id and billing_month are required")

        record = container.billing_service.recalculate(parse_id(data["user_id"], "user id"), data["billing_month"])
        return jsonify({"success": True, "record": serialize(record)})
