from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

from db.models import Product
from utils.pure import format_ugx, generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail plus quantity picker.
    Returns True if the cart changed, False if not.
    """

    order_qty = reactive(1)

    def __init__(self, product: Product) -> None:
        super().__init__()
        self._prod = product

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical():
                yield Label("Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        p = self._prod
        table_rows = [
            ["Price", f"{format_ugx(p.price)} / {p.unit}"],
            ["Tags", ", ".join(p.tags) or "-"],
            ["Available", "Yes" if p.available else "No"],
        ]
        md = (
            f"### {p.name}\n\n{p.description}\n\n"
            + generate_markdown_table(["Attribute", "Value"], table_rows, ["l", "l"])
        )
        await self.query_one(MarkdownViewer).document.update(md)

        if not p.available:
            order_btn = self.query_one("#btn-addcart", Button)
            order_btn.label = "Unavailable"
            order_btn.disabled = True
            order_btn.variant = "warning"

        self.query_one("#input-order-qty").validators = [Number(minimum=1)]

        line = self.app.state.cart.get_line(p.id)
        if line:
            self.order_qty = line.quantity
            self.query_one("#btn-addcart", Button).label = "Update Cart"

        self.query_one("#input-order-qty").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def on_input_changed(self, message: Input.Changed) -> None:
        if (
            message.input.id == "input-order-qty"
            and message.value
            and message.input.is_valid
            and self.focused == message.input
        ):
            self.order_qty = int(message.value)

    def watch_order_qty(self, qty: int):
        self.query_one("#btn-sub-qty", Button).disabled = qty <= 1
        self.query_one("#input-order-qty", Input).value = str(qty)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        if self.order_qty > 1:
            self.order_qty -= 1

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    def handle_addcart(self):
        cart = self.app.state.cart
        if self._prod.id in cart:
            cart.update_quantity(self._prod.id, self.order_qty)
            self.app.notify("Updated cart item quantity.")
        else:
            cart.add_item(self._prod, self.order_qty)
            self.app.notify(f"{self._prod.name} added to cart.")
        self.dismiss(True)
