"""
Domain model for the product catalog and its administrative copy.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from wholesale.domain.errors import InvalidInputError, UnknownReferenceError
from wholesale.domain.ids import time_derived_id
from wholesale.domain.money import as_decimal

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class Product:
    """Catalog entry value object."""
    id: str
    name: str
    category: str
    unit: str
    price: Decimal
    available: bool = True
    image: str = ""

    def __post_init__(self):
        if not self.id:
            raise InvalidInputError("Product id is required")
        price = as_decimal(self.price, "price")
        if price <= 0:
            raise InvalidInputError("Price must be greater than zero")
        object.__setattr__(self, "price", price)


class Catalog:
    """Read-only, ordered product catalog keyed by product id."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: dict[str, Product] = {}
        for product in products:
            if product.id in self._products:
                raise InvalidInputError(f"Duplicate product id {product.id}")
            self._products[product.id] = product

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def require(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise UnknownReferenceError(f"Product {product_id} not found")
        return product

    def categories(self) -> list[str]:
        """Distinct lower-cased categories in catalog order, prefixed with "all"."""
        seen = [ALL_CATEGORIES]
        for product in self:
            category = product.category.lower()
            if category not in seen:
                seen.append(category)
        return seen

    def browse(self, category: str = ALL_CATEGORIES, search: str = "") -> list[Product]:
        """Filter by category (case-insensitive) and name substring."""
        category = (category or ALL_CATEGORIES).lower()
        term = (search or "").lower()
        return [
            product for product in self
            if (category == ALL_CATEGORIES or product.category.lower() == category)
            and term in product.name.lower()
        ]


class ProductRegistry:
    """
    Administrative copy of the product list.

    Edits here never touch the Catalog that carts resolve prices from.
    """

    def __init__(self, products: Iterable[Product] = ()):
        self._products: list[Product] = list(products)

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def categories(self) -> list[str]:
        categories: list[str] = []
        for product in self._products:
            if product.category not in categories:
                categories.append(product.category)
        return categories

    def search(self, query: str = "", category: str = ALL_CATEGORIES) -> list[Product]:
        """Match query against name or category; category filter is exact."""
        term = (query or "").lower()
        category = category or ALL_CATEGORIES
        return [
            product for product in self._products
            if (not term or term in product.name.lower() or term in product.category.lower())
            and (category == ALL_CATEGORIES or product.category == category)
        ]

    def add(
        self,
        name: str,
        category: str,
        unit: str,
        price,
        now: datetime,
        available: bool = True,
        image: str = "",
    ) -> Product:
        """Add a product with a time-derived id."""
        price = as_decimal(price, "price")
        self._validate(name, category, price)
        product_id = time_derived_id("p", now, {p.id for p in self._products})
        product = Product(
            id=product_id,
            name=name.strip(),
            category=category.strip(),
            unit=unit,
            price=price,
            available=available,
            image=image,
        )
        self._products.append(product)
        return product

    def update(self, product_id: str, **changes) -> Product:
        """Replace fields of an existing product."""
        current = self._require(product_id)
        unknown = set(changes) - {"name", "category", "unit", "price", "available", "image"}
        if unknown:
            raise InvalidInputError(f"Unknown product fields: {', '.join(sorted(unknown))}")
        if "price" in changes:
            changes["price"] = as_decimal(changes["price"], "price")
        updated = replace(current, **changes)
        self._validate(updated.name, updated.category, updated.price)
        self._products = [updated if p.id == product_id else p for p in self._products]
        return updated

    def delete(self, product_id: str) -> Product:
        product = self._require(product_id)
        self._products = [p for p in self._products if p.id != product_id]
        return product

    def toggle_availability(self, product_id: str) -> Product:
        product = self._require(product_id)
        return self.update(product_id, available=not product.available)

    def _require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise UnknownReferenceError(f"Product {product_id} not found")
        return product

    @staticmethod
    def _validate(name: str, category: str, price: Decimal) -> None:
        if not (name or "").strip() or not (category or "").strip() or price <= 0:
            raise InvalidInputError("Name, category and a positive price are required")
