from datetime import datetime
from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from shop.promotions import PROMOTIONS, Promotion, filter_promotions, status_label
from utils.pure import format_ugx
from views.base_screen import BaseScreen

FILTERS = {"all": None, "category": "category", "product": "product"}


class PromotionsScreen(BaseScreen):
    """
    Current deals, filterable by what they apply to.
    """

    def __init__(self) -> None:
        super().__init__()
        self._filter: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-promo-filters"):
            yield Button("All", id="btn-filter-all", variant="primary")
            yield Button("Category Deals", id="btn-filter-category")
            yield Button("Product Deals", id="btn-filter-product")
        yield MarkdownViewer(id="md-promotions", show_table_of_contents=False)

    def on_mount(self) -> None:
        self.render_promotions()

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.render_promotions()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if not (event.button.id or "").startswith("btn-filter-"):
            return
        key = event.button.id.removeprefix("btn-filter-")
        self._filter = FILTERS[key]
        for btn in self.query("#hort-promo-filters Button").results(Button):
            btn.variant = "primary" if btn is event.button else "default"
        self.render_promotions()

    def render_promotions(self) -> None:
        now = datetime.now()
        promos = filter_promotions(PROMOTIONS, self._filter)
        if promos:
            md = "\n\n---\n\n".join(self._render_one(p, now) for p in promos)
        else:
            md = "No promotions found for the selected filter."
        self.query_one(MarkdownViewer).document.update(
            "## Special Offers & Promotions\n\n" + md
        )

    @staticmethod
    def _render_one(promo: Promotion, now: datetime) -> str:
        parts = [
            f"### {promo.title}  ({promo.discount}% OFF)",
            f"*{status_label(promo, now)}*",
            promo.description,
        ]
        if promo.code:
            parts.append(f"Use code: `{promo.code}`")
        if promo.minimum_purchase:
            parts.append(f"Min. purchase: {format_ugx(promo.minimum_purchase)}")
        return "\n\n".join(parts)
