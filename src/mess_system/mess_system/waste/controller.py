from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, json_body, serialize
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/waste", methods=["GET"], endpoint="admin_waste_list")
    @admin_required
    def admin_waste_list():
        records = container.waste_service.list_records(
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            meal_type=request.args.get("mealType"),
        )
        return jsonify(serialize(records))

    @app.route("/api/admin/waste", methods=["POST"], endpoint="admin_waste_add")
    @admin_required
    def admin_waste_add():
        data = json_body()
        required = ("meal_date", "meal_type", "total_served", "total_consumed")
        if any(data.get(k) in (None, "") for k in required):
            raise ValidationError("Missing required fields")

        record = container.waste_service.add_waste_record(
            meal_date=data["meal_date"],
            meal_type=data["meal_type"],
            total_served=data["total_served"],
            total_consumed=data["total_consumed"],
            notes=data.get("notes"),
        )
        return jsonify({"id": record.waste_id, "message": "Waste record added successfully", "record": serialize(record)}), 201

    @app.route("/api/admin/waste/summary", methods=["GET"], endpoint="admin_waste_summary")
    @admin_required
    def admin_waste_summary():
        rows = container.waste_service.summary(
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        return jsonify({"summary": serialize(rows)})
