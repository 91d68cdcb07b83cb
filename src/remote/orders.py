# order creation procedure
from __future__ import annotations

from db import models
from remote.client import RemoteClient, RemoteError
from utils.errors import OrderCreationFailed, ValidationFailed
from utils.logger import get_logger

_logger = get_logger(__name__)


class OrderGateway:
    def __init__(self, client: RemoteClient):
        self.client = client

    async def create_order(self, request: models.OrderRequest) -> models.CreatedOrder:
        """
        Persist a new order remotely and return it with its assigned number.
        Every call is a new attempt; no deduplication happens on this side.
        """
        self.client.ensure_configured()
        _logger.info(
            f"Creating order: {len(request.order_items)} line(s), "
            f"total {request.total_amount}"
        )
        try:
            result = await self.client.rpc("create_order", request.to_rpc_params())
        except RemoteError as e:
            _logger.error(f"Order creation error: {e}")
            raise OrderCreationFailed(e.message) from e

        try:
            created = models.parse_record(models.CreatedOrder, result)
        except ValidationFailed as e:
            # the order may exist remotely, but without a number it cannot be confirmed
            raise OrderCreationFailed("no order number was returned") from e
        _logger.info(f"Order created: {created.order_number}")
        return created
