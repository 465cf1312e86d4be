from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .repository import CollectionBackend

logger = logging.getLogger(__name__)


class JsonFileBackend(CollectionBackend):
    """All collections in one JSON document on disk.

    Writes go to a temp file in the same directory and are moved over the
    original, so readers see either the old or the new document.
    """

    def __init__(self, path: Path, *, seed: Optional[Mapping[str, List[dict]]] = None):
        self._path = Path(path)
        self._seed = dict(seed or {})

    def load(self) -> Dict[str, List[dict]]:
        if not self._path.exists():
            if self._seed:
                logger.info("Initializing %s with seed data", self._path)
                self._write(self._seed)
            return json.loads(json.dumps(self._seed))
        with self._path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid data file {self._path}: expected an object of collections")
        return data

    def save(self, changes: Mapping[str, List[dict]]) -> None:
        data = self.load()
        data.update({name: list(rows) for name, rows in changes.items()})
        self._write(data)

    def _write(self, data: Mapping[str, List[dict]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self._path.parent), prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self._path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
