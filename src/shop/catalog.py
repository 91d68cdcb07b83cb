# client-side product filtering for the catalogue screen
from __future__ import annotations

from typing import Iterable, List, Optional

from db.models import Product


def matches_query(product: Product, query: str) -> bool:
    """Case-insensitive substring match on name, description or any tag."""
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in product.name.lower()
        or q in product.description.lower()
        or any(q in tag.lower() for tag in product.tags)
    )


def filter_products(
    products: Iterable[Product],
    category_id: Optional[str] = None,
    query: str = "",
) -> List[Product]:
    return [
        p
        for p in products
        if (not category_id or p.category_id == category_id) and matches_query(p, query)
    ]


def featured_products(products: Iterable[Product]) -> List[Product]:
    return [p for p in products if p.featured]
