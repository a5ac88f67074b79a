"""Example: drive the service layer directly (without Flask).

Controllers are thin; business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.mess_system.mess_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, meal_prices=settings.MEAL_PRICES)

    container.attendance_service.set_status(user_id=1, meal_date="2024-06-03", meal_type="lunch", status="will_attend")
    print(container.billing_service.get_record(user_id=1, billing_month="2024-06"))


if __name__ == "__main__":
    main()
