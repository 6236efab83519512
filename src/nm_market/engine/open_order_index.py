"""OpenOrderIndex — in-memory list of open order ids.

Removal is swap-remove: the last id moves into the vacated slot, so
enumeration order is NOT stable across removals. Consumers needing a stable
order must sort by item_id.
"""
from collections.abc import Iterable


class OpenOrderIndex:
    def __init__(self, order_ids: Iterable[str] = ()) -> None:
        self._ids: list[str] = list(order_ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._ids

    def append(self, order_id: str) -> None:
        self._ids.append(order_id)

    def remove(self, order_id: str) -> bool:
        """Linear scan + swap-remove. Returns False if the id was not present."""
        for pos, candidate in enumerate(self._ids):
            if candidate == order_id:
                last = self._ids.pop()
                if pos < len(self._ids):
                    self._ids[pos] = last
                return True
        return False

    def snapshot(self) -> list[str]:
        return list(self._ids)
