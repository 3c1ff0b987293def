"""In-memory product catalogue with a price index."""

from __future__ import annotations

import threading
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from trainingkit.price_index import PriceIndex

DEFAULT_PAGE_SIZE = 20


@dataclass
class Product:
    """A catalogue entry."""

    id: str = ""
    name: str = ""
    category: str = ""
    price: float = 0.0
    rating: float = 0.0
    stock: int = 0
    tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class StoreStats:
    """Counts by category and price band, and the mean rating."""

    category_counts: Dict[str, int] = field(default_factory=dict)
    price_distribution: Dict[str, int] = field(default_factory=dict)
    average_rating: float = 0.0


def _price_band(price: float) -> str:
    if price <= 50:
        return "0-50"
    if price <= 100:
        return "51-100"
    return "100+"


class ProductStore:
    """Thread-safe store of products indexed by price in a B-tree."""

    def __init__(self, degree: int) -> None:
        self._lock = threading.RLock()
        self._products: Dict[str, Product] = {}
        self._index = PriceIndex(degree)

    def _resolve(self, ids: Iterable[str]) -> List[Product]:
        return [self._products[pid] for pid in ids if pid in self._products]

    def add(self, product: Product) -> Product:
        """Store ``product``, giving it an id if it has none and stamping its creation."""
        with self._lock:
            if not product.id:
                product.id = uuid.uuid4().hex
            product.created_at = datetime.now()
            self._products[product.id] = product
            self._index.insert(product.price, product.id)
            return product

    def get(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def delete(self, product_id: str) -> None:
        """Remove a product; unknown ids are ignored."""
        with self._lock:
            product = self._products.pop(product_id, None)
            if product is not None:
                self._index.delete(product.price, product_id)

    def query_price_range(self, low: float, high: float) -> List[Product]:
        """Products priced from ``low`` to ``high`` inclusive, cheapest first."""
        with self._lock:
            return self._resolve(self._index.range_query(low, high))

    def query_price_range_linear(self, low: float, high: float) -> List[Product]:
        """Same selection as ``query_price_range`` found by scanning every product."""
        with self._lock:
            return [p for p in self._products.values() if low <= p.price <= high]

    def update(self, product_id: str, product: Product) -> Product:
        """Replace the product stored under ``product_id``."""
        with self._lock:
            old = self._products.get(product_id)
            if old is None:
                raise KeyError(product_id)
            product.id = product_id
            if old.price != product.price:
                self._index.delete(old.price, product_id)
                self._index.insert(product.price, product_id)
            self._products[product_id] = product
            return product

    def page(self, page: int, size: int) -> List[Product]:
        """One page of products ordered by price; pages are numbered from 1."""
        page = max(page, 1)
        if size < 1:
            size = DEFAULT_PAGE_SIZE
        with self._lock:
            return self._resolve(self._index.in_order_page((page - 1) * size, size))

    def by_category_sorted(self, category: str) -> List[Product]:
        """Products of ``category`` ordered by price."""
        with self._lock:
            return [p for p in self._resolve(self._index.in_order()) if p.category == category]

    def stats(self) -> StoreStats:
        with self._lock:
            products = list(self._products.values())
        average = sum(p.rating for p in products) / len(products) if products else 0.0
        return StoreStats(
            category_counts=dict(Counter(p.category for p in products)),
            price_distribution=dict(Counter(_price_band(p.price) for p in products)),
            average_rating=average,
        )

    def format_by_price(self) -> str:
        """One line per product, cheapest first."""
        with self._lock:
            return "\n".join(
                f"ID: {p.id}, Name: {p.name}, Price: {p.price:.2f}"
                for p in self._resolve(self._index.in_order())
            )