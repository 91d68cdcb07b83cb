"""
Order placement: cart + customer details -> remote order -> WhatsApp hand-off.
"""

from __future__ import annotations

import webbrowser
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from db import models
from remote.orders import OrderGateway
from shop.cart import Cart
from shop.order_message import CustomerInfo, build_whatsapp_link, format_order_message
from shop.session import SessionStore
from utils.config import DEFAULT_STORE_NAME, DEFAULT_WHATSAPP_NUMBER
from utils.errors import SessionExpired, ValidationFailed
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderReceipt:
    order_number: str
    total_amount: int
    message: str
    link: str
    link_opened: bool


def build_order_request(
    cart: Cart, customer: CustomerInfo, user_id: Optional[str] = None
) -> models.OrderRequest:
    items = [
        models.OrderRequestItem(
            product_id=line.product.id,
            quantity=line.quantity,
            unit_price=line.product.price,
            total_price=line.total_price,
        )
        for line in cart.items
    ]
    total_amount = sum(item.total_price for item in items)
    if total_amount != cart.total_price:
        raise ValidationFailed("Cart changed while placing the order.", field="cart")
    return models.OrderRequest(
        user_id=user_id,
        customer_name=customer.name,
        customer_email=customer.email or None,
        customer_phone=customer.phone,
        customer_address=customer.address,
        order_items=items,
        total_amount=total_amount,
        notes=customer.notes or None,
    )


class OrderSubmission:
    """
    Runs one checkout. Validation happens before any remote call; the cart is
    cleared only once the remote order exists. Opening the chat link is
    best-effort and its outcome does not affect the order.
    """

    def __init__(
        self,
        cart: Cart,
        gateway: OrderGateway,
        session_store: SessionStore,
        open_link: Callable[[str], object] = webbrowser.open,
        whatsapp_number: str = DEFAULT_WHATSAPP_NUMBER,
        store_name: str = DEFAULT_STORE_NAME,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.cart = cart
        self.gateway = gateway
        self.session_store = session_store
        self.open_link = open_link
        self.whatsapp_number = whatsapp_number
        self.store_name = store_name
        self.clock = clock

    async def _resolve_customer(
        self, customer: CustomerInfo, require_session: bool
    ) -> tuple[CustomerInfo, Optional[models.AppUser]]:
        customer = customer.stripped()
        user = await self.session_store.get_current_user()
        if require_session and user is None:
            raise SessionExpired()
        if user is not None:
            customer = CustomerInfo(
                name=customer.name or user.full_name,
                phone=customer.phone or (user.phone or "").strip(),
                address=customer.address or (user.address or "").strip(),
                email=customer.email or user.email,
                notes=customer.notes,
            )
        return customer, user

    def _validate(self, customer: CustomerInfo) -> None:
        if self.cart.is_empty:
            raise ValidationFailed("Your cart is empty.", field="cart")
        if not customer.name:
            raise ValidationFailed("Please enter your name.", field="name")
        if not customer.phone:
            raise ValidationFailed("Please enter your phone number.", field="phone")
        if not customer.address:
            raise ValidationFailed(
                "Please enter your delivery address.", field="address"
            )

    def _open(self, link: str) -> bool:
        try:
            result = self.open_link(link)
        except Exception as e:
            _logger.warning(f"Could not open WhatsApp link: {e}")
            return False
        # webbrowser.open reports a missing browser by returning False
        return result is not False

    async def submit(
        self, customer: CustomerInfo, require_session: bool = False
    ) -> OrderReceipt:
        customer, user = await self._resolve_customer(customer, require_session)
        self._validate(customer)

        request = build_order_request(
            self.cart, customer, user_id=user.id if user else None
        )
        lines = self.cart.items
        _logger.debug(f"Submitting order request: {request.model_dump()}")

        created = await self.gateway.create_order(request)

        message = format_order_message(
            created.order_number,
            customer,
            lines,
            placed_at=self.clock(),
            store_name=self.store_name,
        )
        link = build_whatsapp_link(self.whatsapp_number, message)
        opened = self._open(link)

        self.cart.clear_cart()
        return OrderReceipt(
            order_number=created.order_number,
            total_amount=request.total_amount,
            message=message,
            link=link,
            link_opened=opened,
        )
