from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from db import database, models
from remote.auth import AuthGateway
from remote.catalog import CatalogGateway
from remote.client import RemoteClient
from remote.orders import OrderGateway
from shop.cart import Cart
from shop.checkout import OrderSubmission
from shop.session import AuthService, SessionStore
from utils.config import Settings, load_settings
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class AppState:
    """
    Everything one running storefront owns: configuration, the remote client,
    the cart and the login session. Screens receive it through the app
    instead of reaching for module globals.

    Created by the app at start-up (``start``) and released on exit
    (``stop``).
    """

    settings: Settings = field(default_factory=load_settings)
    cart: Cart = field(default_factory=Cart)
    session_store: SessionStore = field(default_factory=SessionStore)

    client: RemoteClient = field(init=False)
    auth: AuthService = field(init=False)
    catalog: CatalogGateway = field(init=False)
    orders: OrderGateway = field(init=False)

    products: List[models.Product] = field(default_factory=list)
    categories: List[models.Category] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.client = RemoteClient(self.settings)
        self.auth = AuthService(AuthGateway(self.client), self.session_store)
        self.catalog = CatalogGateway(self.client)
        self.orders = OrderGateway(self.client)

    @property
    def user(self) -> Optional[models.AppUser]:
        return self.auth.user

    async def start(self) -> None:
        database.DB_PATH = self.settings.db_path
        if not self.client.is_configured:
            _logger.warning(
                "Store service is not configured; set SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        user = await self.auth.restore()
        if user:
            _logger.info(f"Restored session for {user.email}")

    async def stop(self) -> None:
        self.cart.clear_cart()
        await self.client.close()

    async def load_catalog(self) -> None:
        """Refresh the cached products and categories from the store service."""
        self.products = await self.catalog.list_products()
        self.categories = await self.catalog.list_categories()

    def product(self, product_id: str) -> Optional[models.Product]:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    def checkout(self, open_link: Callable[[str], object]) -> OrderSubmission:
        return OrderSubmission(
            self.cart,
            self.orders,
            self.session_store,
            open_link=open_link,
            whatsapp_number=self.settings.whatsapp_number,
            store_name=self.settings.store_name,
        )
