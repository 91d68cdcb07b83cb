from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Label, Rule

from shop.cart import CartLine
from utils.pure import format_ugx
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal
from views.modal_prod_detail import ProdDetailModal


class CartItemAction(Message):
    bubble = True

    def __init__(self, product_id: str, action: str) -> None:
        super().__init__()
        self.product_id = product_id
        self.action = action


class CartItemActionLabel(Label):
    def __init__(self, product_id: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.product_id = product_id

    def action_cart(self, action: str):
        self.post_message(CartItemAction(self.product_id, action))


class CartItemWidget(HorizontalGroup):
    def __init__(self, line: CartLine):
        super().__init__()
        self.line = line

    def compose(self):
        product = self.line.product
        pid = product.id
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(product.name, id="label-item-name")
                yield Label(f"{self.line.quantity} {product.unit}", id="label-item-qty")
                yield Label(format_ugx(product.price), id="label-item-price")
                yield Label(format_ugx(self.line.total_price), id="label-item-total")
            with Container(id="div-actions"):
                yield CartItemActionLabel(pid, "[@click=cart('dec')] - [/]", id="link-item-dec")
                yield CartItemActionLabel(pid, "[@click=cart('inc')] + [/]", id="link-item-inc")
                yield CartItemActionLabel(pid, "[@click=cart('edit')]Edit[/]", id="link-item-edit")
                yield CartItemActionLabel(
                    pid, "[@click=cart('remove')]Remove[/]", id="link-item-remove"
                )


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, totals, and the way into checkout.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Label("", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Continue Shopping", id="btn-shop")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        self.watch(self.app, "cart_version", self.handle_cart_change)

    @work(exclusive=True)  # exclusive, else two refreshes may mount duplicates
    async def handle_cart_change(self, _version: int = 0):
        cart = self.app.state.cart
        content = self.query_one("#vertscroll-content")
        await content.remove_children()
        await content.mount_all([CartItemWidget(line) for line in cart.items])

        if cart.is_empty:
            content.add_class("no-items")
            total = "Your cart is empty. Add some products to get started!"
        else:
            content.remove_class("no-items")
            total = (
                f"Total Items: {cart.total_items}   "
                f"Total Quantity: {cart.total_quantity} units   "
                f"Total Amount: {format_ugx(cart.total_price)}"
            )
        self.query_one("#label-cart-total", Label).update(total)
        self.query_one("#btn-checkout", Button).disabled = cart.is_empty

    @on(CartItemAction)
    @work()
    async def handle_item_action(self, event: CartItemAction):
        cart = self.app.state.cart
        line = cart.get_line(event.product_id)
        if line is None:
            return

        if event.action == "inc":
            cart.update_quantity(line.product.id, line.quantity + 1)
        elif event.action == "dec":
            # dropping below one removes the line
            cart.update_quantity(line.product.id, line.quantity - 1)
        elif event.action == "edit":
            await self.app.push_screen_wait(ProdDetailModal(line.product))
        elif event.action == "remove":
            if await self.app.push_screen_wait(
                DialogModal(
                    "Do you really want to remove this item from cart?",
                    primary_text="Yes",
                    secondary_text="No",
                    tone="warning",
                )
            ):
                cart.remove_item(line.product.id)
                self.notify("Item removed from cart.", severity="information")

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        cart = self.app.state.cart
        if cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            cart.clear_cart()

    @on(Button.Pressed, "#btn-shop")
    async def handle_shop(self) -> None:
        await self.app.switch_mode("catalog")

    @on(Button.Pressed, "#btn-checkout")
    def handle_checkout(self) -> None:
        if self.app.state.cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return
        self.app.push_screen(CheckoutModal())
