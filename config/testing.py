import os

from .base import DB_CONFIG, MEAL_PRICES, PACKAGE_PRICES  # noqa: F401

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
