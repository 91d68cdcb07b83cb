from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, MarkdownViewer

from db.models import Order
from utils.errors import SessionExpired, StorefrontError
from utils.messages import SessionExpiredMessage
from utils.pure import format_timestamp, format_ugx
from views.base_screen import BaseScreen


class ProfileScreen(BaseScreen):
    """
    Account details (editable) and order history, most recent first.

    Layout:
    - Profile form at the top.
    - Orders table, with the highlighted order's items shown underneath.
    """

    BINDINGS = [
        Binding("ctrl+r", "reload_orders", "Reload Orders", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-guest"):
            yield Label("Please log in to view your profile and orders.")
            yield Button("Log in / Sign up", id="btn-profile-login", variant="primary")
        with Vertical(id="div-profile"):
            with Horizontal(id="hort-profile-form"):
                with Vertical():
                    yield Label("Full Name")
                    yield Input(id="input-profile-name")
                with Vertical():
                    yield Label("Phone")
                    yield Input(id="input-profile-phone")
                with Vertical():
                    yield Label("Address")
                    yield Input(id="input-profile-address")
            with Horizontal(id="hort-profile-btns"):
                yield Label("", id="label-member-since")
                yield Button("Cancel", id="btn-profile-cancel")
                yield Button("Save", id="btn-profile-save", variant="primary")
            yield DataTable(id="table-orders")
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order No", "Date", "Status", "Items", "Total")

        self.watch(self.app, "current_user", self.handle_user_change)

    def handle_user_change(self, user) -> None:
        self.query_one("#div-guest").display = user is None
        self.query_one("#div-profile").display = user is not None
        if user is None:
            self._orders = []
            self.query_one(DataTable).clear()
            return
        self._reset_form()
        self.query_one("#label-member-since", Label).update(
            f"Member since {format_timestamp(user.created_at)}"
        )
        self.load_orders()

    def _reset_form(self) -> None:
        user = self.app.state.user
        if user is None:
            return
        self.query_one("#input-profile-name", Input).value = user.full_name
        self.query_one("#input-profile-phone", Input).value = user.phone or ""
        self.query_one("#input-profile-address", Input).value = user.address or ""

    @on(Button.Pressed, "#btn-profile-login")
    def handle_login(self) -> None:
        self.app.request_login()

    @on(Button.Pressed, "#btn-profile-cancel")
    def handle_cancel(self) -> None:
        self._reset_form()

    @on(Button.Pressed, "#btn-profile-save")
    @work(exclusive=True, group="profile")
    async def handle_save(self) -> None:
        btn = self.query_one("#btn-profile-save", Button)
        btn.disabled = True
        try:
            await self.app.state.auth.update_profile(
                full_name=self.query_one("#input-profile-name", Input).value,
                phone=self.query_one("#input-profile-phone", Input).value,
                address=self.query_one("#input-profile-address", Input).value,
            )
        except SessionExpired:
            self.post_message(SessionExpiredMessage())
            return
        except StorefrontError as e:
            self.notify(e.user_message, severity="error")
            return
        finally:
            btn.disabled = False

        self.app.current_user = self.app.state.user
        self.notify("Profile updated successfully!")

    @on(ScreenResume)
    def handle_resume(self) -> None:
        if self.app.state.user is not None:
            self.load_orders()

    def action_reload_orders(self) -> None:
        if self.app.state.user is not None:
            self.load_orders()

    @work(exclusive=True, group="orders")
    async def load_orders(self) -> None:
        table = self.query_one(DataTable)
        table.loading = True
        try:
            orders = await self.app.state.auth.get_user_orders()
        except SessionExpired:
            self.post_message(SessionExpiredMessage())
            return
        except StorefrontError as e:
            self.notify(e.user_message, severity="error")
            return
        finally:
            table.loading = False

        self._orders = orders
        table.clear()
        for o in orders:
            table.add_row(
                o.order_number,
                format_timestamp(o.created_at),
                o.status.value.capitalize(),
                str(len(o.items)),
                format_ugx(o.total_amount),
                key=o.order_number,
            )
        if orders:
            table.move_cursor(row=0)
            self._render_detail(orders[0])
        else:
            self._render_detail(None)

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        number = event.row_key.value
        order = next((o for o in self._orders if o.order_number == number), None)
        self._render_detail(order)

    def _render_detail(self, order: Order | None) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            viewer.document.update("### No orders yet.")
            return

        header = (
            f"### Order #{order.order_number}\n"
            f"Date: {format_timestamp(order.created_at)}  \n"
            f"Status: {order.status.value.capitalize()}  \n"
            f"Deliver To: {order.customer_address or '-'}\n\n"
        )
        rows = [
            "| Product | Qty | Unit Price | Line Total |",
            "|---|---:|---:|---:|",
        ]
        for item in order.items:
            name = item.product.name if item.product else item.product_id
            unit = item.product.unit if item.product else ""
            rows.append(
                f"| {name} | {item.quantity} {unit} | {format_ugx(item.unit_price)} "
                f"| {format_ugx(item.total_price)} |"
            )
        footer = f"\n\n**Total:** {format_ugx(order.total_amount)}"
        if order.notes:
            footer += f"\n\nNotes: {order.notes}"
        viewer.document.update(header + "\n".join(rows) + footer)
