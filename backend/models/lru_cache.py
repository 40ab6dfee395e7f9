from collections import OrderedDict
from typing import Any, Dict, Hashable


class LRUCache:
    """
    Fixed-capacity key/value store that evicts the least recently used key.
    Both get and set refresh the key's recency.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._data: "OrderedDict[Hashable, Any]" = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        if key not in self._data:
            return default
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key: Hashable, value: Any) -> None:
        if key in self._data:
            self._data.move_to_end(key)
            self._data[key] = value
            return

        if len(self._data) >= self.capacity:
            self._data.popitem(last=False)
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def keys(self):
        """Keys from least to most recently used."""
        return list(self._data.keys())

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    @property
    def size(self) -> int:
        return len(self._data)


class StatsLRUCache(LRUCache):
    """LRU cache that also counts hits and misses for a hit-rate metric."""

    def __init__(self, capacity: int):
        super().__init__(capacity)
        self.hits = 0
        self.misses = 0

    def get_with_stats(self, key: Hashable, default: Any = None) -> Any:
        if key in self._data:
            self.hits += 1
        else:
            self.misses += 1
        return self.get(key, default)

    def get_hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def reset_stats(self) -> None:
        self.hits = 0
        self.misses = 0

    def clear(self) -> None:
        super().clear()
        self.reset_stats()

    def stats(self) -> Dict[str, Any]:
        return {
            "size": len(self),
            "capacity": self.capacity,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.get_hit_rate(),
        }
