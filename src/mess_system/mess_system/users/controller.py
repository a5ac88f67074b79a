from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, current_user_id, json_body, login_required, serialize
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/menu/select-package", methods=["POST"], endpoint="menu_select_package")
    @login_required
    def menu_select_package():
        package_id = json_body().get("packageId")
        if not package_id:
            raise ValidationError("Package ID is required")

        selection = container.package_service.select_package(user_id=current_user_id(), package_id=package_id)
        return jsonify(
            {
                "success": True,
                "message": "Package selected successfully",
                "selectedPackage": selection.selected_package.value,
                "monthlyBill": selection.monthly_bill,
            }
        )

    @app.route("/api/menu/selected-package", methods=["GET"], endpoint="menu_selected_package")
    @login_required
    def menu_selected_package():
        selection = container.package_service.get_selection(user_id=current_user_id())
        return jsonify(
            {
                "selectedPackage": selection.selected_package.value if selection.selected_package else None,
                "monthlyBill": selection.monthly_bill,
            }
        )

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        return jsonify({"users": serialize(container.user_service.list_users())})

    @app.route("/api/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_user_get")
    @admin_required
    def admin_user_get(user_id: int):
        return jsonify({"user": serialize(container.user_service.get_user(user_id))})

    @app.route("/api/admin/users/<int:user_id>", methods=["PUT"], endpoint="admin_user_update")
    @admin_required
    def admin_user_update(user_id: int):
        data = json_body()
        container.user_service.update_user(
            user_id=user_id,
            email=data.get("email", ""),
            full_name=data.get("full_name", ""),
            mobile_number=data.get("mobile_number"),
            mess_status=data.get("mess_status") or "active",
            total_amount=data.get("total_amount") or 0,
        )
        return jsonify({"success": True})

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_user_delete")
    @admin_required
    def admin_user_delete(user_id: int):
        container.user_service.delete_user(user_id)
        return jsonify({"success": True})
