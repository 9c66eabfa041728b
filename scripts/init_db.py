"""Create the backing store for the configured STORAGE_BACKEND."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hrms.config import get_settings_module
from hrms.container import build_store


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    store = build_store(settings)
    if settings.STORAGE_BACKEND == "mysql":
        db = settings.DB_CONFIG
        target = f"{db.get('user')}@{db.get('host')}:{db.get('port', 3306)}/{db.get('database')}"
    else:
        target = getattr(settings, "DATA_FILE", "") or "memory"
    print(f"OK: store ready -> {target} (keys={len(store.keys())})")


if __name__ == "__main__":
    main()
