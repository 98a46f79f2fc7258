from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Set

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "gKenteiIncorrectCardIds"


# ----------------------------- Key/value stores -----------------------------
class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store with the same surface as JsonFileStore."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore:
    """
    Durable local key/value store kept in one JSON object file,
    string keys to string values (same contract as browser localStorage).
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except ValueError:
            logger.warning("Overwriting unreadable storage file %s", self.path)
            items = {}
        items[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)


# ------------------------ Incorrect set load/save ------------------------
def _normalize_ids(raw) -> Set[int]:
    if not isinstance(raw, list):
        raise ValueError(f"Expected a JSON array of card ids, got {type(raw).__name__}")
    out = set()
    for v in raw:
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"Invalid card id in storage: {v!r}")
        out.add(v)
    return out


def load_incorrect_ids(store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> Set[int]:
    """Read the incorrect set. Absent or unreadable values give an empty set."""
    try:
        stored = store.get_item(key)
        if not stored:
            return set()
        return _normalize_ids(json.loads(stored))
    except (OSError, ValueError):
        logger.exception("Failed to load incorrect cards from local storage")
        return set()


def save_incorrect_ids(store: KeyValueStore, ids: Iterable[int], key: str = DEFAULT_STORAGE_KEY) -> None:
    """Full overwrite of the stored incorrect set. Best effort: failures are only logged."""
    payload = json.dumps(sorted(ids))
    try:
        store.set_item(key, payload)
    except (OSError, TypeError) as e:
        logger.warning("Saving incorrect cards failed: %s", e)
