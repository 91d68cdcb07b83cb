# product and category reads
from __future__ import annotations

from typing import List

from db import models
from remote.client import RemoteClient, RemoteError
from utils.errors import CatalogFetchFailed
from utils.logger import get_logger

_logger = get_logger(__name__)


class CatalogGateway:
    def __init__(self, client: RemoteClient):
        self.client = client

    async def list_products(self) -> List[models.Product]:
        """Available products ordered by name."""
        self.client.ensure_configured()
        try:
            rows = await self.client.select(
                "products",
                {"select": "*", "available": "eq.true", "order": "name.asc"},
            )
        except RemoteError as e:
            _logger.error(f"Error fetching products: {e}")
            raise CatalogFetchFailed(e.message) from e
        products = models.parse_records(models.Product, rows)
        _logger.debug(f"Loaded {len(products)} products")
        return products

    async def list_categories(self) -> List[models.Category]:
        """Active categories in display order."""
        self.client.ensure_configured()
        try:
            rows = await self.client.select(
                "categories",
                {"select": "*", "is_active": "eq.true", "order": "display_order.asc"},
            )
        except RemoteError as e:
            _logger.error(f"Error fetching categories: {e}")
            raise CatalogFetchFailed(e.message) from e
        return models.parse_records(models.Category, rows)
