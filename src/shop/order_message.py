"""
Human-readable order summary and the WhatsApp deep link that carries it.

The text is a pure function of its inputs so the same order always renders
the same message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
from urllib.parse import quote

from shop.cart import CartLine
from utils.pure import format_long_date, format_short_time, format_ugx

WHATSAPP_URL = "https://wa.me/{number}?text={text}"
NOT_PROVIDED = "Not provided"


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    phone: str
    address: str
    email: str = ""
    notes: str = ""

    def stripped(self) -> "CustomerInfo":
        return CustomerInfo(
            name=self.name.strip(),
            phone=self.phone.strip(),
            address=self.address.strip(),
            email=self.email.strip(),
            notes=self.notes.strip(),
        )


def _item_block(index: int, line: CartLine) -> str:
    product = line.product
    return (
        f"\n*{index}. {product.name}*\n"
        f"   📦 Quantity: {line.quantity} {product.unit}\n"
        f"   💰 Unit Price: {format_ugx(product.price)}\n"
        f"   💵 Subtotal: {format_ugx(line.total_price)}\n"
        f"   🏷️ Tags: {', '.join(product.tags)}\n"
    )


def format_order_message(
    order_number: str,
    customer: CustomerInfo,
    lines: Sequence[CartLine],
    placed_at: datetime,
    store_name: str = "M.A Online Store",
) -> str:
    total_quantity = sum(line.quantity for line in lines)
    total_amount = sum(line.total_price for line in lines)

    header = "🛍️ *NEW ORDER PLACED* 🛍️\n\n"
    order_info = (
        "📋 *Order Details*\n"
        f"🔢 Order #: *{order_number}*\n"
        f"📅 Date: {format_long_date(placed_at)}\n"
        f"⏰ Time: {format_short_time(placed_at)}\n\n"
    )
    customer_details = (
        "👤 *Customer Information*\n"
        f"📝 Name: {customer.name}\n"
        f"📧 Email: {customer.email or NOT_PROVIDED}\n"
        f"📱 Phone: {customer.phone or NOT_PROVIDED}\n"
        f"🏠 Address: {customer.address or NOT_PROVIDED}\n\n"
    )
    items = "🛒 *Ordered Items*\n" + "".join(
        _item_block(i, line) for i, line in enumerate(lines, start=1)
    )
    summary = (
        "\n💰 *Order Summary*\n"
        f"📊 Total Items: {len(lines)}\n"
        f"🧮 Total Quantity: {total_quantity} units\n"
        f"💵 *Total Amount: {format_ugx(total_amount)}*\n\n"
    )
    notes = f"📝 *Special Notes*\n{customer.notes}\n\n" if customer.notes else ""
    footer = (
        "✅ *Order Status: PENDING*\n"
        "🚚 Delivery will be arranged after confirmation\n"
        "💳 Payment: Cash on Delivery\n\n"
        f"Thank you for choosing {store_name}! 🙏\n"
        "We'll contact you shortly to confirm your order."
    )
    return header + order_info + customer_details + items + summary + notes + footer


def build_whatsapp_link(number: str, message: str) -> str:
    return WHATSAPP_URL.format(number=number.lstrip("+"), text=quote(message, safe=""))


def contact_link(number: str, message: Optional[str] = None) -> str:
    """Plain chat link to the store, optionally with a greeting."""
    if not message:
        return f"https://wa.me/{number.lstrip('+')}"
    return build_whatsapp_link(number, message)
