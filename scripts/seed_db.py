from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_pro.timesheet_pro.container import build_backend
from src.timesheet_pro.timesheet_pro.database.seed import seed_if_empty
from src.timesheet_pro.timesheet_pro.store.entity_store import EntityStore


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    backend = build_backend(
        settings.STORE_BACKEND,
        data_file=getattr(settings, "DATA_FILE", None),
        db_config=getattr(settings, "DB_CONFIG", None),
    )
    if seed_if_empty(EntityStore(backend)):
        print(f"OK: seeded demo data ({settings.STORE_BACKEND})")
    else:
        print("Store already has users; nothing to do")


if __name__ == "__main__":
    main()
