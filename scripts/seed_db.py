from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.staff_hive.staff_hive.common.log_setup import setup_logging
from src.staff_hive.staff_hive.database.bootstrap import DEMO_ADMIN, ensure_demo_data

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)
    logger.info("Seeded %s; login with %s / %s", db_config.get("database"), DEMO_ADMIN[1], DEMO_ADMIN[2])


if __name__ == "__main__":
    main()
