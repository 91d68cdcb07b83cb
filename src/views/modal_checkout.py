from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, LoadingIndicator, MarkdownViewer

from shop.order_message import CustomerInfo
from utils.errors import SessionExpired, StorefrontError, ValidationFailed
from utils.messages import NewOrderMessage, SessionExpiredMessage
from utils.pure import format_ugx, generate_markdown_table
from views.modal_dialog import DialogModal, OrderPlacedModal

FIELDS = ("name", "email", "phone", "address", "notes")


class CheckoutModal(ModalScreen[str | None]):
    """
    Order summary plus customer details.
    Dismisses with the order number on success, None otherwise.
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            with VerticalScroll(id="div-customer"):
                yield Label("Full Name *")
                yield Input(placeholder="Enter your full name", id="input-name")
                yield Label("Email Address")
                yield Input(placeholder="your.email@example.com", id="input-email")
                yield Label("Phone Number *")
                yield Input(placeholder="+256 XXX XXX XXX", id="input-phone")
                yield Label("Delivery Address *")
                yield Input(placeholder="Enter your delivery address", id="input-address")
                yield Label("Special Notes")
                yield Input(
                    placeholder="Any special instructions or requests...",
                    id="input-notes",
                )
            yield LoadingIndicator(id="loading-order")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order via WhatsApp", id="btn-submit", variant="primary")

    async def on_mount(self):
        cart = self.app.state.cart
        headers = ["Product", "Unit Price", "Quantity", "Subtotal"]
        rows = [
            [
                line.product.name,
                format_ugx(line.product.price),
                f"{line.quantity} {line.product.unit}",
                format_ugx(line.total_price),
            ]
            for line in cart.items
        ]
        md = "### Order Summary\n\n" + generate_markdown_table(
            headers, rows, ["l", "r", "c", "r"]
        )
        md += (
            f"\n\nTotal Items: {cart.total_items}  \n"
            f"Total Quantity: {cart.total_quantity} units  \n"
            f"**Total Amount:** {format_ugx(cart.total_price)}"
        )
        await self.query_one(MarkdownViewer).document.update(md)

        user = self.app.state.user
        if user:
            self.query_one("#input-name", Input).value = user.full_name
            self.query_one("#input-email", Input).value = user.email
            self.query_one("#input-phone", Input).value = user.phone or ""
            self.query_one("#input-address", Input).value = user.address or ""

        self.query_one("#loading-order").display = False
        self.query_one("#input-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    def _customer(self) -> CustomerInfo:
        values = {f: self.query_one(f"#input-{f}", Input).value for f in FIELDS}
        return CustomerInfo(**values)

    def _set_processing(self, processing: bool) -> None:
        self.query_one("#loading-order").display = processing
        self.query_one("#btn-submit", Button).disabled = processing
        self.query_one("#btn-quit", Button).disabled = processing

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        for f in FIELDS:
            self.query_one(f"#input-{f}", Input).remove_class("-invalid")

        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? You will be redirected to WhatsApp to complete it.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        submission = self.app.state.checkout(open_link=self.app.open_url)
        self._set_processing(True)
        try:
            receipt = await submission.submit(
                self._customer(), require_session=self.app.state.user is not None
            )
        except SessionExpired:
            # the app logs out and notifies; a retry goes through as a guest
            self.app.post_message(SessionExpiredMessage())
            return
        except ValidationFailed as e:
            if e.field in FIELDS:
                widget = self.query_one(f"#input-{e.field}", Input)
                widget.add_class("-invalid")
                widget.focus()
            self.notify(e.user_message, severity="error")
            return
        except StorefrontError as e:
            self.notify(e.user_message, severity="error")
            return
        finally:
            self._set_processing(False)

        if not receipt.link_opened:
            await self.app.push_screen_wait(
                OrderPlacedModal(receipt.order_number, receipt.link)
            )
        self.dismiss(receipt.order_number)
        self.app.post_message(NewOrderMessage(receipt.order_number, receipt.link_opened))

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)
