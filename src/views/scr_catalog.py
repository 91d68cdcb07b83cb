from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Input, Label, Select

from shop.catalog import featured_products, filter_products
from shop.order_message import contact_link
from utils.pure import format_ugx
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal


class CatalogScreen(BaseScreen):
    """
    Product browsing: free-text search plus a category filter, filtered
    locally over the products the app loaded at start-up.
    """

    # bindings here are only here to be displayed in footer
    BINDINGS = [
        Binding("enter", "noop", "View Product", show=True, key_display="⏎"),
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Input(
                id="input-search", placeholder="Search products, descriptions or tags..."
            )
            yield Select([], prompt="All categories", id="select-category")
        yield Label("", id="label-featured")
        yield DataTable(id="table-products")
        with Horizontal(id="hort-catalog-footer"):
            yield Label("", id="label-result-cnt")
            yield Button("Contact us on WhatsApp", id="btn-contact")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Price", "Unit", "Tags")

        self.watch(self.app, "catalog_version", self.handle_catalog_loaded)
        self.query_one("#input-search").focus()

    def action_noop(self) -> None:
        pass

    def action_reload(self) -> None:
        self.app.load_catalog()

    def handle_catalog_loaded(self, _version: int) -> None:
        state = self.app.state
        self.query_one("#select-category", Select).set_options(
            [(c.name, c.id) for c in state.categories]
        )
        featured = featured_products(state.products)
        self.query_one("#label-featured", Label).update(
            "Popular: " + ", ".join(p.name for p in featured) if featured else ""
        )
        self.update_results()

    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-category")
    def update_results(self) -> None:
        query = self.query_one("#input-search", Input).value
        category = self.query_one("#select-category", Select).value
        category_id = category if isinstance(category, str) else None

        results = filter_products(self.app.state.products, category_id, query)

        table = self.query_one(DataTable)
        table.clear()
        for p in results:
            table.add_row(
                p.name, format_ugx(p.price), p.unit, ", ".join(p.tags), key=p.id
            )
        if results:
            label = f"{len(results)} product(s)"
        else:
            label = "No products match your search criteria. Try adjusting your filters."
        self.query_one("#label-result-cnt", Label).update(label)

    @on(DataTable.RowSelected)
    def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        product = self.app.state.product(event.row_key.value)
        if product:
            self.app.push_screen(ProdDetailModal(product))

    @on(Button.Pressed, "#btn-contact")
    def handle_contact(self) -> None:
        settings = self.app.state.settings
        self.app.open_url(
            contact_link(
                settings.whatsapp_number,
                f"Hello {settings.store_name}! I would like to ask about your products.",
            )
        )
