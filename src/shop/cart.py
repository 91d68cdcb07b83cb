from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from db.models import Product
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int

    @property
    def total_price(self) -> int:
        return self.product.price * self.quantity


class Cart:
    """
    In-memory cart for the running session.

    Lines keep insertion order and there is at most one line per product id.
    Totals are computed from the current lines on every read. No operation
    raises; invalid input is ignored.
    """

    def __init__(self, on_change: Optional[Callable[["Cart"], None]] = None):
        self._lines: List[CartLine] = []
        self.on_change = on_change

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _index(self, product_id: str) -> Optional[int]:
        for i, line in enumerate(self._lines):
            if line.product.id == product_id:
                return i
        return None

    def add_item(self, product: Product, quantity: int = 1) -> None:
        # non-positive quantities are rejected, not clamped
        if quantity < 1:
            _logger.debug(f"Ignoring add of {product.id} with quantity {quantity}")
            return
        i = self._index(product.id)
        if i is None:
            self._lines.append(CartLine(product, quantity))
        else:
            line = self._lines[i]
            self._lines[i] = dataclasses.replace(
                line, quantity=line.quantity + quantity
            )
        self._changed()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        i = self._index(product_id)
        if i is None:
            return
        if quantity < 1:
            self.remove_item(product_id)
            return
        self._lines[i] = dataclasses.replace(self._lines[i], quantity=quantity)
        self._changed()

    def remove_item(self, product_id: str) -> None:
        i = self._index(product_id)
        if i is None:
            return
        del self._lines[i]
        self._changed()

    def clear_cart(self) -> None:
        self._lines.clear()
        self._changed()

    def get_line(self, product_id: str) -> Optional[CartLine]:
        i = self._index(product_id)
        return None if i is None else self._lines[i]

    @property
    def items(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def total_price(self) -> int:
        return sum(line.total_price for line in self._lines)

    @property
    def total_items(self) -> int:
        return len(self._lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return isinstance(product_id, str) and self._index(product_id) is not None
