from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, json_body, login_required, serialize, target_user_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave", methods=["GET"], endpoint="leave_list")
    @login_required
    def leave_list():
        uid = target_user_id(request.args.get("user_id"))
        return jsonify({"leaveRequests": serialize(container.leave_service.list_for_user(user_id=uid))})

    @app.route("/api/leave", methods=["POST"], endpoint="leave_submit")
    @login_required
    def leave_submit():
        data = json_body()
        leave = container.leave_service.submit_leave(
            user_id=target_user_id(data.get("user_id")),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            reason=data.get("reason"),
        )
        return jsonify({"success": True, "id": leave.leave_id, "leave": serialize(leave)}), 201

    @app.route("/api/admin/leaves", methods=["GET"], endpoint="admin_leave_list")
    @admin_required
    def admin_leave_list():
        return jsonify({"leaveRequests": serialize(container.leave_service.list_all())})

    @app.route("/api/admin/leaves/<int:leave_id>/status", methods=["POST"], endpoint="admin_leave_status")
    @admin_required
    def admin_leave_status(leave_id: int):
        leave = container.leave_service.set_leave_status(leave_id=leave_id, status=json_body().get("status"))
        return jsonify({"success": True, "leave": serialize(leave)})
