"""Small on-disk key/value store standing in for browser-local storage.

The file holds one flat JSON object of string keys to string values. A
missing or corrupt file reads as empty.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..core.errors import LegacyDataError
from ..schemas.log import LegacyLogEntry

logger = logging.getLogger(__name__)

LEGACY_LOGS_KEY = "ojt_logs_data"


class LocalStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("local_store.unreadable", extra={"extra_data": {"path": str(self.path)}})
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class LegacyLogArchive:
    """Read side of the pre-account, local-only log store."""

    def __init__(self, store: LocalStore, key: str = LEGACY_LOGS_KEY) -> None:
        self.store = store
        self.key = key

    def _records(self) -> list:
        raw = self.store.get_item(self.key)
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("legacy_logs.unparseable", exc_info=True)
            return []
        return decoded if isinstance(decoded, list) else []

    def has_records(self) -> bool:
        """True while any record is stored, valid or not."""
        return len(self._records()) > 0

    def load(self, *, strict: bool = False) -> list[LegacyLogEntry]:
        """Parse the stored records.

        Invalid records are skipped with a warning, or, when ``strict``, abort the
        whole load with ``LegacyDataError`` so nothing is imported and then lost.
        """
        entries: list[LegacyLogEntry] = []
        rejected: list[object] = []
        for item in self._records():
            try:
                entries.append(LegacyLogEntry.model_validate(item))
            except ValidationError:
                rejected.append(_record_id(item))
                logger.warning("legacy_logs.invalid_record", extra={"extra_data": {"record_id": _record_id(item)}})
        if rejected and strict:
            raise LegacyDataError(rejected)
        return entries

    def clear(self) -> None:
        self.store.remove_item(self.key)


def _record_id(item: object) -> object:
    return item.get("id") if isinstance(item, dict) else None
