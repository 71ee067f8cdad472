"""Load demo organizations, projects and employees, then upsert the demo logins.

Demo accounts: admin/admin123 (all employees), user1/user123 (employees 1,2),
user2/user123 (employees 3,4,5).
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

from src.commission_system.commission_system.database.bootstrap import DEMO_USERS, apply_seed_sql, ensure_demo_users

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)
    logger.info("seeded %s with demo users: %s", db_config.get("database"), ", ".join(DEMO_USERS))


if __name__ == "__main__":
    main()
