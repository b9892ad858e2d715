# backend/storefront/cart_store.py
"""Shopping cart state for the storefront.

The store is a plain object handed to whoever renders the cart and the
checkout. Every mutation goes through one of its named operations and is
written through a ``CartStorage`` adapter, so the cart survives reloads.
"""
import enum
import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Union

from pydantic import ValidationError

from schemas.cart import CartItem

logger = logging.getLogger(__name__)

# Storage key the cart is persisted under
CART_NAMESPACE = "cart-storage"


class CartEvent(str, enum.Enum):
    ADDED = "added"
    QUANTITY_UPDATED = "quantity_updated"
    UPDATED = "updated"
    REMOVED = "removed"


CartListener = Callable[[CartEvent, CartItem], None]


def log_cart_event(event: CartEvent, item: CartItem) -> None:
    logger.info("Cart %s: %s (cantidad %s)", event.value, item.name, item.quantity)


class CartStorage(Protocol):
    def load(self, namespace: str) -> Optional[List[dict]]: ...

    def save(self, namespace: str, items: List[dict]) -> None: ...


class MemoryCartStorage:
    def __init__(self, initial: Optional[Dict[str, List[dict]]] = None):
        self._data: Dict[str, List[dict]] = dict(initial or {})

    def load(self, namespace: str) -> Optional[List[dict]]:
        items = self._data.get(namespace)
        return [dict(i) for i in items] if items is not None else None

    def save(self, namespace: str, items: List[dict]) -> None:
        self._data[namespace] = [dict(i) for i in items]


class JsonFileCartStorage:
    """All namespaces in one JSON document on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cart file %s: %s", self.path, e)
            return {}

    def load(self, namespace: str) -> Optional[List[dict]]:
        entry = self._read().get(namespace)
        if not isinstance(entry, dict):
            return None
        return entry.get("items")

    def save(self, namespace: str, items: List[dict]) -> None:
        data = self._read()
        data[namespace] = {"items": items}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


class CartStore:
    def __init__(
        self,
        storage: Optional[CartStorage] = None,
        namespace: str = CART_NAMESPACE,
        listener: Optional[CartListener] = None,
    ):
        self._storage = storage if storage is not None else MemoryCartStorage()
        self._namespace = namespace
        self._listener = listener or log_cart_event
        # Rehydration is silent
        self._items: List[CartItem] = self._load()

    # ---- persistence ----

    def _load(self) -> List[CartItem]:
        raw = self._storage.load(self._namespace) or []
        try:
            return [CartItem.model_validate(i) for i in raw]
        except (ValidationError, TypeError) as e:
            logger.warning("Discarding stored cart %r: %s", self._namespace, e)
            return []

    def _persist(self) -> None:
        self._storage.save(
            self._namespace,
            [i.model_dump(by_alias=True, exclude_none=True) for i in self._items],
        )

    def _find(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self._items if i.id == item_id), None)

    # ---- queries ----

    @property
    def items(self) -> List[CartItem]:
        return [i.model_copy() for i in self._items]

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_total_items(self) -> int:
        return sum(i.quantity for i in self._items)

    def subtotal(self) -> int:
        return sum(i.line_total for i in self._items)

    # ---- mutations ----

    def add_item(self, item: Union[CartItem, dict]) -> CartItem:
        """Add one unit of ``item``. The incoming quantity is ignored."""
        if isinstance(item, CartItem):
            new_item = item.model_copy(update={"quantity": 1})
        else:
            new_item = CartItem.model_validate({**item, "quantity": 1})
        existing = self._find(new_item.id)

        if existing is not None:
            existing.quantity += 1
            event, result = CartEvent.QUANTITY_UPDATED, existing
        else:
            result = new_item
            self._items.append(result)
            event = CartEvent.ADDED

        self._persist()
        self._listener(event, result.model_copy())
        return result.model_copy()

    def remove_item(self, item_id: str) -> None:
        item = self._find(item_id)
        if item is None:
            return
        self._items = [i for i in self._items if i.id != item_id]
        self._persist()
        self._listener(CartEvent.REMOVED, item)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return
        item = self._find(item_id)
        if item is None:
            return
        item.quantity = quantity
        self._persist()
        self._listener(CartEvent.UPDATED, item.model_copy())

    def clear_cart(self) -> None:
        self._items = []
        self._persist()
