# typed records exchanged with the remote store service
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from utils.errors import ValidationFailed

_RemoteModel = TypeVar("_RemoteModel", bound=BaseModel)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Product(_Record):
    id: str
    name: str
    description: str = ""
    price: int = Field(..., ge=0, description="Unit price in whole UGX")
    image: str = ""
    category_id: str = ""
    tags: tuple[str, ...] = ()
    available: bool = True
    unit: str = "piece"
    featured: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, v: Any) -> Any:
        return () if v is None else v


class Category(_Record):
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class AppUser(_Record):
    id: str
    email: str
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True
    created_at: datetime


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ProductSnapshot(_Record):
    """Minimal product projection embedded in order items."""

    id: str
    name: str
    image: str = ""
    unit: str = "piece"


class OrderItem(_Record):
    id: Optional[str] = None
    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: int
    total_price: int
    product: Optional[ProductSnapshot] = Field(None, alias="products")


class Order(_Record):
    id: str
    order_number: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    total_amount: int
    status: OrderStatus = OrderStatus.PENDING
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = Field(default_factory=list, alias="order_items")

    @field_validator("items", mode="before")
    @classmethod
    def _none_items(cls, v: Any) -> Any:
        return [] if v is None else v


class OrderRequestItem(_Record):
    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: int
    total_price: int


class OrderRequest(_Record):
    """What the client sends to the order-creation procedure."""

    user_id: Optional[str] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: str
    customer_address: str
    order_items: List[OrderRequestItem]
    total_amount: int
    notes: Optional[str] = None

    # name and email travel in the chat message only; create_order does not take them
    LOCAL_ONLY: ClassVar[frozenset[str]] = frozenset({"customer_name", "customer_email"})

    def to_rpc_params(self) -> dict:
        """Procedure arguments, prefixed the way the remote functions expect."""
        return {
            f"p_{k}": v
            for k, v in self.model_dump(mode="json", exclude=self.LOCAL_ONLY).items()
        }


class CreatedOrder(_Record):
    id: Optional[str] = None
    order_number: str
    total_amount: Optional[int] = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None


def parse_record(model: Type[_RemoteModel], payload: Any) -> _RemoteModel:
    """Validate one remote payload, failing closed with ValidationFailed."""
    # single-row procedures sometimes come back wrapped in a one element list
    if isinstance(payload, list) and len(payload) == 1:
        payload = payload[0]
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(
            f"Unexpected {model.__name__} data from the store service.",
            field=model.__name__,
        ) from e


def parse_records(model: Type[_RemoteModel], payload: Any) -> List[_RemoteModel]:
    """Validate a list payload; None is treated as an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, Iterable) or isinstance(payload, (str, bytes, dict)):
        raise ValidationFailed(
            f"Expected a list of {model.__name__} from the store service.",
            field=model.__name__,
        )
    return [parse_record(model, row) for row in payload]
