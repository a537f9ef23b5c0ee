"""In-process TTL cache shared by the API clients"""

import time
from typing import Any, Callable, Dict, Optional


class TTLCache:
    """Flat key/value memo with a per-entry time-to-live.

    Entries are stored as ``{"data", "ts", "ttl"}`` and dropped lazily when a
    read finds them expired. There is no size bound.
    """

    def __init__(self, default_ttl: float = 300, clock: Callable[[], float] = time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry["ts"] < entry["ttl"]:
            return entry["data"]
        self._entries.pop(key, None)
        return None

    def set(self, key: str, data: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = {
            "data": data,
            "ts": self._clock(),
            "ttl": self.default_ttl if ttl is None else ttl,
        }

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
