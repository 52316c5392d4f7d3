"""
Durable key/value backends for the per-device session state.

Every backend is write-through: ``set`` returns only after the value is durable.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from sqlalchemy.orm import Session as DBSession

from walk_randomizer.models import models

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileKeyValueStore:
    """All keys of one device in a single JSON object file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"State file {self.path} could not be read ({exc}), treating it as empty")
            return {}
        if not raw:
            return {}
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"State file {self.path} is not valid JSON, treating it as empty")
            return {}
        if not isinstance(payload, dict):
            logger.warning(f"State file {self.path} must contain a JSON object, treating it as empty")
            return {}
        values: dict[str, str] = {}
        for key, value in payload.items():
            if not isinstance(value, str):
                logger.warning(f"State file {self.path}: dropping non-string value for key {key!r}")
                continue
            values[str(key)] = value
        return values

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        payload = self._read_all()
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        tmp_path.replace(self.path)


class SqlKeyValueStore:
    """Rows of ``session_state_entries`` scoped to one device namespace."""

    def __init__(self, db: DBSession, namespace: str) -> None:
        self.db = db
        self.namespace = namespace

    def _entry(self, key: str) -> models.SessionStateEntry | None:
        return self.db.query(models.SessionStateEntry).filter(
            models.SessionStateEntry.namespace == self.namespace,
            models.SessionStateEntry.key == key,
        ).first()

    def get(self, key: str) -> str | None:
        entry = self._entry(key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        entry = self._entry(key)
        if entry:
            entry.value = value
        else:
            self.db.add(models.SessionStateEntry(namespace=self.namespace, key=key, value=value))
        self.db.commit()
