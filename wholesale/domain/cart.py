"""
Domain model for the working cart.
"""
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from wholesale.domain.catalog import Catalog
from wholesale.domain.errors import InvalidInputError
from wholesale.domain.money import ZERO, as_decimal


class CartLine:
    """One product in the cart, with the price captured when it was added."""

    def __init__(self, product_id: str, quantity: Decimal, unit_price: Decimal, notes: str = ""):
        self.product_id = product_id
        self.quantity = quantity
        self.unit_price = unit_price
        self.notes = notes

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    def __eq__(self, other):
        if not isinstance(other, CartLine):
            return NotImplemented
        return (
            self.product_id == other.product_id
            and self.quantity == other.quantity
            and self.unit_price == other.unit_price
            and self.notes == other.notes
        )

    def __repr__(self):
        return f"CartLine({self.product_id!r}, quantity={self.quantity}, unit_price={self.unit_price})"


class Cart:
    """
    Line items for the order being composed.

    Lines are unique per product id and kept in insertion order. The total is
    always recomputed from the lines.
    """

    def __init__(self, catalog: Catalog, lines: Iterable[CartLine] | None = None):
        self._catalog = catalog
        self._lines: list[CartLine] = []
        for line in lines or []:
            if self._find(line.product_id) is not None:
                raise InvalidInputError(f"Duplicate cart line for product {line.product_id}")
            self._lines.append(line)

    @property
    def lines(self) -> list[CartLine]:
        """Current lines (list copy)."""
        return list(self._lines)

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines), ZERO)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get(self, product_id: str) -> CartLine | None:
        return self._find(product_id)

    def add_item(self, product_id: str, quantity, notes: str = "") -> CartLine:
        """Add a product, merging into an existing line by accumulating quantity."""
        quantity = as_decimal(quantity, "quantity")
        if quantity <= 0:
            raise InvalidInputError("Quantity must be positive")
        product = self._catalog.require(product_id)

        line = self._find(product_id)
        if line is not None:
            line.quantity += quantity
            line.notes = notes
            return line

        line = CartLine(product_id, quantity, product.price, notes)
        self._lines.append(line)
        return line

    def remove_item(self, product_id: str) -> bool:
        """Remove the line for product_id; returns False when there was none."""
        line = self._find(product_id)
        if line is None:
            return False
        self._lines.remove(line)
        return True

    def update_quantity(self, product_id: str, quantity) -> CartLine | None:
        """Overwrite a line's quantity; zero or negative removes the line."""
        quantity = as_decimal(quantity, "quantity")
        line = self._find(product_id)
        if line is None:
            return None
        if quantity <= 0:
            self._lines.remove(line)
            return None
        line.quantity = quantity
        return line

    def clear(self) -> None:
        self._lines.clear()

    def _find(self, product_id: str) -> CartLine | None:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None
