from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone
import json
import time
import logging

from memkv.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 24 * 60 * 60  # seconds

class Record:
    """
    A stored value plus its creation and last-update timestamps (epoch seconds)
    """
    __slots__ = ("key", "value", "created_at", "updated_at")

    def __init__(self, key: str, value: str, created_at: float, updated_at: float):
        self.key = key
        self.value = value
        self.created_at = created_at
        self.updated_at = updated_at

    def copy(self) -> "Record":
        return Record(self.key, self.value, self.created_at, self.updated_at)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "value": self.value,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented
        return (self.key, self.value, self.created_at, self.updated_at) == \
            (other.key, other.value, other.created_at, other.updated_at)

    def __repr__(self):
        return f"Record(key={self.key!r}, value={self.value!r}, created_at={self.created_at}, updated_at={self.updated_at})"

def _isoformat(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()

def _reject_constant(name: str):
    # NaN / Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")

def parse_json(value: str) -> Tuple[Any, bool]:
    """
    - Return (parsed, True) if `value` is a JSON document, (None, False) otherwise
    """
    try:
        return json.loads(value, parse_constant=_reject_constant), True
    except (ValueError, RecursionError):
        # too deeply nested to decode counts as not JSON
        return None, False

def canonicalize(value: str) -> Optional[str]:
    """
    - Re-serialize `value` in compact, key-sorted form if it parses as JSON
    - Return None if it does not
    """
    parsed, ok = parse_json(value)
    if not ok:
        return None
    try:
        return json.dumps(parsed, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    except RecursionError:
        return None

class DataStore:
    """
    A dictionary of key -> Record guarded by a single reader/writer lock.

    `get` takes the shared side, everything that mutates the map (`set`, `delete`,
    `sweep`, `flush`) takes the exclusive side. The map is never touched outside it.
    """
    def __init__(self, max_age: float = DEFAULT_MAX_AGE, preserve_created_at: bool = False,
                 canonicalize_json: bool = True):
        self._store: Dict[str, Record] = {}
        self._lock = ReadWriteLock()
        self.max_age = max_age
        self.preserve_created_at = preserve_created_at
        self.canonicalize_json = canonicalize_json

    """
    -----------------------HELPERS-------------------------
    """
    def _now(self) -> float:
        return time.time()

    def _expired(self, record: Record, now: float) -> bool:
        return now - record.created_at > self.max_age

    """
    -----------------------OPERATIONS-------------------------
    """
    def set(self, key: str, value: str) -> None:
        """
        - Insert a new record, or overwrite the value of an existing one
        - `updated_at` is always refreshed; `created_at` only when not preserving it
        """
        with self._lock.write_lock():
            now = self._now()
            existing = self._store.get(key)
            if existing is not None and self.preserve_created_at:
                created_at = existing.created_at
            else:
                created_at = now
            self._store[key] = Record(key, value, created_at, max(now, created_at))
            logger.debug(f"Set key '{key}'")

    def get(self, key: str) -> Tuple[Optional[Record], bool]:
        """
        - Return (record, True) if the key exists, (None, False) otherwise
        - The returned record is a copy; JSON values come back canonicalized when enabled
        """
        with self._lock.read_lock():
            logger.debug(f"Getting value for key '{key}'")
            record = self._store.get(key)
            if record is None:
                return None, False
            record = record.copy()

        if self.canonicalize_json:
            canonical = canonicalize(record.value)
            if canonical is not None:
                record.value = canonical
        return record, True

    def delete(self, key: str) -> bool:
        """
        - Delete a key from the store
        - Return True if key was deleted, False if it did not exist
        """
        with self._lock.write_lock():
            logger.debug(f"Deleting key '{key}'")
            return self._store.pop(key, None) is not None

    def sweep(self, now: Optional[float] = None) -> int:
        """
        - Remove every record whose creation time is older than `max_age`
        - Return the number of records removed
        """
        with self._lock.write_lock():
            if now is None:
                now = self._now()
            expired = [k for k, record in self._store.items() if self._expired(record, now)]
            for key in expired:
                del self._store[key]
        if expired:
            logger.info(f"Sweep removed {len(expired)} expired key(s)")
        return len(expired)

    """
    -----------------------INTROSPECTION-------------------------
    """
    def size(self) -> int:
        with self._lock.read_lock():
            return len(self._store)

    def keys(self) -> List[str]:
        with self._lock.read_lock():
            return list(self._store.keys())

    def flush(self) -> None:
        """
        - Clear the entire store
        """
        with self._lock.write_lock():
            self._store.clear()
