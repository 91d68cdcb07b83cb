"""
Promotions shown on the deals screen.

Promotions are display-only: they are not applied to cart totals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Literal, Optional

Applicability = Literal["all", "category", "product"]


@dataclass(frozen=True)
class Promotion:
    id: str
    title: str
    description: str
    discount: int  # percent
    applicable: Applicability
    start_date: datetime
    end_date: datetime
    code: Optional[str] = None
    minimum_purchase: Optional[int] = None
    image: Optional[str] = None


PROMOTIONS: List[Promotion] = [
    Promotion(
        id="promo-1",
        title="Weekend Fresh Sale",
        description="Fresh fruits and vegetables at special prices every weekend.",
        discount=15,
        applicable="category",
        start_date=datetime(2026, 1, 1),
        end_date=datetime(2026, 12, 31, 23, 59),
        code="FRESH15",
        minimum_purchase=20000,
    ),
    Promotion(
        id="promo-2",
        title="Bulk Rice Deal",
        description="Buy rice in bulk and save on every kilogram.",
        discount=10,
        applicable="product",
        start_date=datetime(2026, 3, 1),
        end_date=datetime(2026, 11, 30, 23, 59),
        minimum_purchase=50000,
    ),
    Promotion(
        id="promo-3",
        title="Festive Season Storewide",
        description="A discount on everything in the store for the festive season.",
        discount=20,
        applicable="all",
        start_date=datetime(2026, 12, 15),
        end_date=datetime(2027, 1, 5, 23, 59),
        code="FESTIVE20",
        minimum_purchase=100000,
    ),
]


def filter_promotions(
    promotions: Iterable[Promotion], applicable: Optional[str] = None
) -> List[Promotion]:
    if not applicable:
        return list(promotions)
    return [p for p in promotions if p.applicable == applicable]


def is_active(promo: Promotion, now: datetime) -> bool:
    return promo.start_date <= now <= promo.end_date


def days_remaining(promo: Promotion, now: datetime) -> int:
    return math.ceil((promo.end_date - now) / timedelta(days=1))


def status_label(promo: Promotion, now: datetime) -> str:
    if is_active(promo, now):
        return f"{days_remaining(promo, now)} days left"
    if promo.start_date > now:
        return "Coming soon"
    return "Expired"
