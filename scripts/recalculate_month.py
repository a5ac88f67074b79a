"""Rebuild every student's bill for one month from the attendance log.

Usage: python scripts/recalculate_month.py 2024-06
"""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mess_system.mess_system.container import build_container

logger = logging.getLogger("recalculate_month")


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if len(argv) != 2:
        logger.error("usage: recalculate_month.py YYYY-MM")
        return 2

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        meal_prices=getattr(settings, "MEAL_PRICES", None),
        package_prices=getattr(settings, "PACKAGE_PRICES", None),
    )

    total = 0.0
    for student in container.users_repo.list_students():
        record = container.billing_service.recalculate(student.user_id, argv[1])
        total += record.total_amount
    logger.info("Recalculated %s: total billed %.2f", argv[1], total)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
