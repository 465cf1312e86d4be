from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_pro.timesheet_pro.database.bootstrap import apply_schema, list_tables
from src.timesheet_pro.timesheet_pro.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn_factory = DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG))

    apply_schema(conn_factory)
    tables = list_tables(conn_factory)
    cfg = conn_factory.config
    print(f"OK: schema ready -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (tables={len(tables)})")


if __name__ == "__main__":
    main()
