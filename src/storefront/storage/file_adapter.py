"""JSON file client storage — one file per key under a directory.

Stands in for browser local storage when the storefront runs as a
standalone process (kiosk mode, CLI tooling).
"""

import json
import os
from pathlib import Path

import structlog

from storefront.storage.port import ClientStorage

logger = structlog.get_logger(__name__)


class JsonFileStorage(ClientStorage):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> dict | None:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def save(self, key: str, value: dict) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(value, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug("Client state written", key=key, path=str(path))
