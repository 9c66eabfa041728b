"""Seed sample collections and the default accounts into the configured store.

Existing keys are left alone; remove them first to reseed.
"""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hrms.config import get_settings_module
from hrms.container import build_container
from hrms.data.context import COLLECTION_NAMES


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    # SEED_SAMPLE_DATA may be off in production; this script seeds regardless.
    settings.SEED_SAMPLE_DATA = True
    container = build_container(settings)

    counts = ", ".join(f"{name}={len(container.ctx.collection(name))}" for name in COLLECTION_NAMES)
    print(f"OK: seeded ({counts}, users={len(container.users_repo.list_all())})")


if __name__ == "__main__":
    main()
