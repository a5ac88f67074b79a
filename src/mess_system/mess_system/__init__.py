"""Mess System package.

Canteen attendance and billing, organized by feature modules (attendance,
billing, leaves, payments, ...) with a thin Flask controller layer over
service/repository layers.
"""
