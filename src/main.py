from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.reactive import reactive
from textual.widgets import LoadingIndicator

from db.models import AppUser
from shop.cart import Cart
from utils.errors import SessionExpired, StorefrontError
from utils.logger import get_logger
from utils.messages import (
    NewOrderMessage,
    QuitRequestedMessage,
    SessionExpiredMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.state import AppState
from views.scr_cart import CartScreen
from views.scr_catalog import CatalogScreen
from views.scr_login import LoginScreen
from views.scr_profile import ProfileScreen
from views.scr_promotions import PromotionsScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "promotions": PromotionsScreen,
        "cart": CartScreen,
        "profile": ProfileScreen,
    }

    MENU = {
        "catalog": "Products",
        "promotions": "Promotions",
        "cart": "Cart",
        "profile": "My Account",
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/catalog.tcss",
        "styles/cart.tcss",
        "styles/profile.tcss",
    ]

    current_user: reactive[AppUser | None] = reactive(None)
    cart_version = reactive(0)
    catalog_version = reactive(0)

    state: AppState

    def __init__(self, state: AppState | None = None):
        super().__init__()
        self.state = state or AppState()
        self.state.cart.on_change = self._handle_cart_mutation

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        await self.state.start()
        self.current_user = self.state.user
        await self.switch_mode("catalog")
        self.load_catalog()

    def _handle_cart_mutation(self, _cart: Cart) -> None:
        self.cart_version += 1

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @work(exclusive=True, group="catalog")
    async def load_catalog(self) -> None:
        try:
            await self.state.load_catalog()
        except StorefrontError as e:
            self.notify(e.user_message, severity="error", timeout=8)
        finally:
            self.catalog_version += 1

    @work(exclusive=True, group="login")
    async def request_login(self) -> None:
        await self.push_screen_wait(LoginScreen())

    @on(UserLoginMessage)
    def handle_user_login(self):
        self.current_user = self.state.user

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.auth.logout()
        self.current_user = None
        self.notify("Logout successful.")
        await self.switch_mode("catalog")

    @on(SessionExpiredMessage)
    @work(exclusive=True, group="session")
    async def handle_session_expired(self):
        await self.state.auth.logout()
        self.current_user = None
        self.notify(SessionExpired.default_message, severity="warning", timeout=8)

    @on(NewOrderMessage)
    async def handle_new_order(self, message: NewOrderMessage):
        _logger.info(f"Order {message.order_number} placed")
        text = f"Order {message.order_number} placed successfully!"
        if message.link_opened:
            text += " You'll be redirected to WhatsApp to complete your order."
        self.notify(text)
        await self.switch_mode("catalog")

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.state.stop()
        self.exit()


def run() -> None:
    StorefrontApp().run()


if __name__ == "__main__":
    run()
