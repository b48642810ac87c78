"""Persistent storage backends for the library.

The library keeps three collections (books, members and loans).  A backend
only needs to hand back the whole collection as a list of plain dict records
and to replace the whole collection on save.  Each save is atomic for that
one collection; writing several collections as one unit is the job of
:class:`shelfwise.repositories.EntityStore`.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger("shelfwise.storage")

BOOKS = "books"
MEMBERS = "members"
LOANS = "loans"
COLLECTIONS = (BOOKS, MEMBERS, LOANS)

Record = Dict[str, Any]


class Storage(ABC):
    """Key-value store of named collections."""

    @abstractmethod
    def load(self, collection: str) -> List[Record]:
        """Return the collection's records, or an empty list if it was never saved."""

    @abstractmethod
    def save(self, collection: str, records: List[Record]) -> None:
        """Replace the whole collection with ``records``."""


class MemoryStorage(Storage):
    def __init__(self) -> None:
        self._data: Dict[str, List[Record]] = {}

    def load(self, collection: str) -> List[Record]:
        return copy.deepcopy(self._data.get(collection, []))

    def save(self, collection: str, records: List[Record]) -> None:
        self._data[collection] = copy.deepcopy(records)


class JsonFileStorage(Storage):
    """One ``<collection>.json`` file per collection inside ``data_dir``."""

    def __init__(self, data_dir: Union[str, Path]) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def load(self, collection: str) -> List[Record]:
        path = self._path(collection)
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"{path} does not hold a list of records")
        return raw

    def save(self, collection: str, records: List[Record]) -> None:
        """Write the collection atomically via a temp file and ``os.replace``."""
        path = self._path(collection)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        logger.debug("Collection saved | collection=%s records=%d", collection, len(records))
