"""Backup every key of the configured store into backups/hrms_<timestamp>.json."""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from hrms.config import get_settings_module
from hrms.container import build_store


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    store = build_store(settings)

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"hrms_{ts}.json"

    doc = {key: store.get(key) for key in sorted(store.keys())}
    out_file.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"OK: Backup created: {out_file} (keys={len(doc)})")


if __name__ == "__main__":
    main()
