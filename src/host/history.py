from __future__ import annotations
from collections import deque
from typing import Deque, List, Sequence

from src.core.models import Alert


class AlertHistory:
    """Buffer de las N alertas más recientes (la más nueva primero)."""

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._items: Deque[Alert] = deque(maxlen=capacity)

    def extend(self, batch: Sequence[Alert]) -> None:
        # el lote llega en orden de emisión; el primero del lote queda más arriba
        for a in reversed(batch):
            self._items.appendleft(a)

    def drop_endpoint(self, endpoint_id: str) -> int:
        kept = [a for a in self._items if a.endpoint_id != endpoint_id]
        removed = len(self._items) - len(kept)
        self._items = deque(kept, maxlen=self.capacity)
        return removed

    def items(self) -> List[Alert]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
