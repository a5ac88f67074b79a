from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, json_body, login_required, serialize, target_user_id
from ..common.validators import parse_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        records = container.attendance_service.list_range(
            user_id=current_user_id(),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        return jsonify({"attendance": serialize(records)})

    @app.route("/api/attendance/day", methods=["GET"], endpoint="attendance_day")
    @login_required
    def attendance_day():
        meals = container.attendance_service.get_day(user_id=current_user_id(), meal_date=request.args.get("date"))
        return jsonify({"meals": serialize(meals)})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary():
        summary = container.attendance_service.summary(
            user_id=current_user_id(),
            start_date=request.args.get("start"),
            end_date=request.args.get("end"),
        )
        return jsonify(
            {
                "stats": {"attended": summary.attended, "skipped": summary.skipped, "onLeave": summary.on_leave},
                "estimatedAmount": summary.estimated_amount,
            }
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_set")
    @login_required
    def attendance_set():
        data = json_body()
        changed = container.attendance_service.set_status(
            user_id=target_user_id(data.get("user_id")),
            meal_date=data.get("meal_date"),
            meal_type=data.get("meal_type"),
            status=data.get("status"),
        )
        return jsonify({"success": True, "changed": changed})

    @app.route("/api/admin/attendance", methods=["POST"], endpoint="admin_attendance_set")
    @admin_required
    def admin_attendance_set():
        data = json_body()
        changed = container.attendance_service.set_status(
            user_id=parse_id(data.get("user_id"), "user id"),
            meal_date=data.get("meal_date"),
            meal_type=data.get("meal_type"),
            status=data.get("status"),
        )
        return jsonify({"success": True, "changed": changed})
