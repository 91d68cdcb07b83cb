# registration, login, profile and order-history calls against the store service
from __future__ import annotations

from typing import List, Optional

from db import models
from remote.client import RemoteClient, RemoteError
from utils import errors
from utils.logger import get_logger

_logger = get_logger(__name__)

EMAIL_TAKEN_MARKER = "Email already registered"
BAD_CREDENTIALS_MARKER = "Invalid email or password"

ORDERS_SELECT = "*,order_items(*,products(id,name,image,unit))"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AuthGateway:
    """
    One method per remote procedure. No state is kept here; the caller decides
    what to do with the returned user (see shop.session.AuthService).
    """

    def __init__(self, client: RemoteClient):
        self.client = client

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> models.AppUser:
        self.client.ensure_configured()
        _logger.info(f"Registering new user: {email}")
        try:
            result = await self.client.rpc(
                "register_user",
                {
                    "p_email": email,
                    "p_password": password,
                    "p_full_name": full_name,
                    "p_phone": _blank_to_none(phone),
                    "p_address": _blank_to_none(address),
                },
            )
        except RemoteError as e:
            _logger.error(f"Registration error: {e}")
            if EMAIL_TAKEN_MARKER in e.message:
                raise errors.DuplicateEmail() from e
            raise errors.RegistrationFailed(e.message) from e

        user = models.parse_record(models.AppUser, result)
        _logger.info(f"User registered: {user.id}")
        return user

    async def login(self, email: str, password: str) -> models.AppUser:
        self.client.ensure_configured()
        _logger.info(f"Authenticating user: {email}")
        try:
            result = await self.client.rpc(
                "authenticate_user", {"p_email": email, "p_password": password}
            )
        except RemoteError as e:
            _logger.error(f"Authentication error: {e}")
            if BAD_CREDENTIALS_MARKER in e.message:
                raise errors.InvalidCredentials() from e
            raise errors.LoginFailed(e.message) from e

        # some deployments answer bad credentials with an empty result
        if not result:
            raise errors.InvalidCredentials()
        return models.parse_record(models.AppUser, result)

    async def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> models.AppUser:
        """
        Update the given fields. None or blank means "leave unchanged"; the
        remote procedure coalesces null arguments with the stored values.
        """
        self.client.ensure_configured()
        _logger.info(f"Updating profile for user {user_id}")
        try:
            result = await self.client.rpc(
                "update_user_profile",
                {
                    "p_user_id": user_id,
                    "p_full_name": _blank_to_none(full_name),
                    "p_phone": _blank_to_none(phone),
                    "p_address": _blank_to_none(address),
                },
            )
        except RemoteError as e:
            _logger.error(f"Profile update error: {e}")
            raise errors.ProfileUpdateFailed(e.message) from e
        return models.parse_record(models.AppUser, result)

    async def get_user_orders(self, user_id: str) -> List[models.Order]:
        """Orders of a user, most recent first, with items and product snapshots."""
        self.client.ensure_configured()
        try:
            rows = await self.client.select(
                "orders",
                {
                    "select": ORDERS_SELECT,
                    "user_id": f"eq.{user_id}",
                    "order": "created_at.desc",
                },
            )
        except RemoteError as e:
            _logger.error(f"Error fetching orders for {user_id}: {e}")
            raise errors.OrdersFetchFailed(e.message) from e

        orders = models.parse_records(models.Order, rows)
        # the service already sorts, but a stale view or proxy should not reorder history
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders
