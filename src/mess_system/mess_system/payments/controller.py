from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, json_body, login_required, serialize
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _settings_json():
        s = container.payment_service.get_settings()
        return {"qrCode": s.qr_code_path, "upiId": s.upi_id, "upiName": s.upi_name}

    @app.route("/api/payment/qr", methods=["GET"], endpoint="payment_qr")
    @login_required
    def payment_qr():
        return jsonify(_settings_json())

    @app.route("/api/admin/payment/qr", methods=["GET"], endpoint="admin_payment_qr")
    @admin_required
    def admin_payment_qr():
        return jsonify(_settings_json())

    @app.route("/api/admin/payment/qr", methods=["PUT"], endpoint="admin_payment_qr_update")
    @admin_required
    def admin_payment_qr_update():
        data = json_body()
        changes = {}
        for key, field in (("qrCode", "qr_code_path"), ("upiId", "upi_id"), ("upiName", "upi_name")):
            if key in data:
                changes[field] = data[key]
        container.payment_service.update_settings(**changes)
        return jsonify({"success": True, **_settings_json()})

    @app.route("/api/admin/payment/qr", methods=["DELETE"], endpoint="admin_payment_qr_delete")
    @admin_required
    def admin_payment_qr_delete():
        container.payment_service.update_settings(qr_code_path=None)
        return jsonify({"success": True, "message": "QR code removed"})

    @app.route("/api/payment/submit", methods=["POST"], endpoint="payment_submit")
    @login_required
    def payment_submit():
        data = json_body()
        payment = container.payment_service.submit_payment(
            user_id=current_user_id(),
            amount=data.get("amount"),
            transaction_id=data.get("transactionId", ""),
            payment_method=data.get("paymentMethod", ""),
            billing_month=data.get("billingMonth"),
        )
        return jsonify({"success": True, "message": "Payment submitted successfully", "paymentId": payment.payment_id})

    @app.route("/api/payment/status", methods=["GET"], endpoint="payment_status")
    @login_required
    def payment_status():
        payments = container.payment_service.list_for_user(
            user_id=current_user_id(),
            billing_month=request.args.get("billingMonth"),
        )
        return jsonify({"payments": serialize(payments)})

    @app.route("/api/admin/payments", methods=["GET"], endpoint="admin_payments")
    @admin_required
    def admin_payments():
        return jsonify({"payments": serialize(container.payment_service.list_all())})

    @app.route("/api/admin/payments/<int:payment_id>/status", methods=["POST"], endpoint="admin_payment_status")
    @admin_required
    def admin_payment_status(payment_id: int):
        payment = container.payment_service.set_payment_status(payment_id=payment_id, status=json_body().get("status"))
        return jsonify({"success": True, "message": f"Payment {payment.status.value}"})
