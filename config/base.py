"""Settings shared by every environment, read from the process environment."""
import os


def _env_price(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "mess_db"),
}

# Unit price per billed meal slot.
MEAL_PRICES = {
    "breakfast": _env_price("BREAKFAST_PRICE", 30),
    "lunch": _env_price("LUNCH_PRICE", 48),
    "dinner": _env_price("DINNER_PRICE", 42),
}

# Monthly package prices are fixed, not user-supplied.
PACKAGE_PRICES = {
    "basic": 2500,
    "premium": 3500,
    "deluxe": 4500,
}
