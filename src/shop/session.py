"""
Cached login session.

The logged-in user is kept in local storage under three keys so that it
survives restarts. A session is honoured for 24 hours after it was saved.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from db import local_storage, models
from remote.auth import AuthGateway
from utils.errors import SessionExpired, ValidationFailed
from utils.logger import get_logger

_logger = get_logger(__name__)

USER_KEY = "app_user"
AUTH_FLAG_KEY = "user_authenticated"
ISSUED_AT_KEY = "user_session_id"
SESSION_KEYS = (USER_KEY, AUTH_FLAG_KEY, ISSUED_AT_KEY)

SESSION_MAX_AGE = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_millis(when: datetime) -> int:
    return int(when.timestamp() * 1000)


def _from_millis(value: str) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class Session:
    user: models.AppUser
    issued_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now - self.issued_at < SESSION_MAX_AGE


class SessionStore:
    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self.clock = clock

    async def save_session(self, user: models.AppUser) -> Session:
        session = Session(user=user, issued_at=self.clock())
        try:
            await local_storage.set_items(
                {
                    USER_KEY: user.model_dump_json(),
                    AUTH_FLAG_KEY: "true",
                    ISSUED_AT_KEY: str(_to_millis(session.issued_at)),
                }
            )
        except (sqlite3.Error, OSError) as e:
            # the user stays logged in for this run even if the cache is unwritable
            _logger.warning(f"Error saving user session: {e}")
        return session

    async def get_session(self) -> Optional[Session]:
        try:
            stored = await local_storage.get_items(SESSION_KEYS)
        except (sqlite3.Error, OSError) as e:
            _logger.warning(f"Error reading user session: {e}")
            return None

        raw_user = stored[USER_KEY]
        flag = stored[AUTH_FLAG_KEY]
        issued = stored[ISSUED_AT_KEY]
        if not (raw_user and flag == "true" and issued):
            return None

        try:
            session = Session(
                user=models.AppUser.model_validate(json.loads(raw_user)),
                issued_at=_from_millis(issued),
            )
        except (ValueError, ValidationError, OverflowError, OSError) as e:
            _logger.warning(f"Discarding unreadable session: {e}")
            await self.logout()
            return None

        if not session.is_valid(self.clock()):
            _logger.info("Session expired, logging out.")
            await self.logout()
            return None
        return session

    async def get_current_user(self) -> Optional[models.AppUser]:
        session = await self.get_session()
        return session.user if session else None

    async def logout(self) -> None:
        try:
            await local_storage.remove_items(SESSION_KEYS)
        except (sqlite3.Error, OSError) as e:
            _logger.warning(f"Error during logout: {e}")

    async def is_authenticated(self) -> bool:
        return await self.get_current_user() is not None


class AuthService:
    """
    Auth gateway calls combined with the session cache: whatever user the
    service returns becomes the cached session user.
    """

    def __init__(self, gateway: AuthGateway, store: SessionStore):
        self.gateway = gateway
        self.store = store
        self.user: Optional[models.AppUser] = None

    async def restore(self) -> Optional[models.AppUser]:
        """Load the cached user at start-up, if the session is still valid."""
        self.user = await self.store.get_current_user()
        return self.user

    async def login(self, email: str, password: str) -> models.AppUser:
        user = await self.gateway.login(email, password)
        await self.store.save_session(user)
        self.user = user
        return user

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> models.AppUser:
        user = await self.gateway.register(email, password, full_name, phone, address)
        await self.store.save_session(user)
        self.user = user
        return user

    async def update_profile(
        self,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> models.AppUser:
        user = await self._require_user()
        updated = await self.gateway.update_profile(user.id, full_name, phone, address)
        await self.store.save_session(updated)
        self.user = updated
        return updated

    async def get_user_orders(self) -> List[models.Order]:
        user = await self._require_user()
        return await self.gateway.get_user_orders(user.id)

    async def logout(self) -> None:
        await self.store.logout()
        self.user = None

    async def current_user(self) -> Optional[models.AppUser]:
        """
        The logged-in user, re-checked against the stored session. An expired
        or cleared session drops the in-memory user as well.
        """
        if self.user is not None and await self.store.get_current_user() is None:
            _logger.info(f"Session for {self.user.email} is gone, dropping cached user.")
            self.user = None
        return self.user

    async def _require_user(self) -> models.AppUser:
        if self.user is None:
            raise ValidationFailed("No user logged in.", field="user")
        user = await self.current_user()
        if user is None:
            raise SessionExpired()
        return user
