"""Cart store port and its in-memory adapter.

A cart maps item ids to quantities. Quantities are always at least 1: an
entry is deleted, never zeroed, when its last unit is removed.
"""

from abc import ABC, abstractmethod
from threading import Lock

from protean.exceptions import ValidationError


class CartStore(ABC):
    """Abstract cart interface."""

    @abstractmethod
    def add(self, item_id: str, quantity: int = 1) -> None:
        ...

    @abstractmethod
    def remove(self, item_id: str) -> None:
        """Decrement the item's quantity, deleting it at zero. No-op when absent."""
        ...

    @abstractmethod
    def items(self) -> dict[str, int]:
        """Snapshot of item id → quantity."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryCart(CartStore):
    def __init__(self) -> None:
        self._items: dict[str, int] = {}
        self._lock = Lock()

    def add(self, item_id: str, quantity: int = 1) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        with self._lock:
            self._items[item_id] = self._items.get(item_id, 0) + quantity

    def remove(self, item_id: str) -> None:
        with self._lock:
            quantity = self._items.get(item_id)
            if quantity is None:
                return
            if quantity > 1:
                self._items[item_id] = quantity - 1
            else:
                del self._items[item_id]

    def items(self) -> dict[str, int]:
        with self._lock:
            return dict(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
