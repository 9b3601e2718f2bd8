from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_admin.payroll_admin.database.bootstrap import seed_defaults
from src.payroll_admin.payroll_admin.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)

    seed_defaults(config, admin_email=settings.ADMIN_EMAIL, admin_password=settings.ADMIN_PASSWORD)
    print(f"OK: Seeded permissions, roles and admin {settings.ADMIN_EMAIL} -> {config.database}")


if __name__ == "__main__":
    main()
