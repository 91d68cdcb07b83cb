import os
import sqlite3
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db import database as db_database  # noqa: E402
from db import local_storage, models  # noqa: E402
from shop import session as session_mod  # noqa: E402
from shop.session import AuthService, SessionStore  # noqa: E402
from utils.errors import InvalidCredentials, SessionExpired, ValidationFailed  # noqa: E402

USER = models.AppUser(
    id="u1",
    email="jane@example.com",
    full_name="Jane Doe",
    phone="+256700000000",
    address=None,
    created_at=datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc),
)


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class LocalStorageTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the DB to a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        db_database.DB_PATH = os.path.join(self.temp_dir.name, "nested", "test.sqlite")
        db_database._initialized = False

    def tearDown(self):
        self.temp_dir.cleanup()


class LocalStorageTests(LocalStorageTestCase):
    async def test_set_get_remove(self):
        self.assertIsNone(await local_storage.get_item("k"))

        await local_storage.set_item("k", "v1")
        await local_storage.set_item("k", "v2")
        self.assertEqual(await local_storage.get_item("k"), "v2")

        await local_storage.set_items({"a": "1", "b": "2"})
        self.assertEqual(
            await local_storage.get_items(["a", "b", "c"]),
            {"a": "1", "b": "2", "c": None},
        )

        await local_storage.remove_items(["a", "missing"])
        self.assertIsNone(await local_storage.get_item("a"))
        await local_storage.remove_item("b")
        self.assertIsNone(await local_storage.get_item("b"))

    async def test_file_is_created_in_missing_directory(self):
        await local_storage.set_item("k", "v")
        self.assertTrue(os.path.exists(db_database.DB_PATH))


class SessionStoreTests(LocalStorageTestCase):
    def setUp(self):
        super().setUp()
        self.clock = FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))
        self.store = SessionStore(clock=self.clock)

    async def test_saved_user_is_returned(self):
        await self.store.save_session(USER)

        self.assertEqual(await self.store.get_current_user(), USER)
        self.assertTrue(await self.store.is_authenticated())

        stored = await local_storage.get_items(session_mod.SESSION_KEYS)
        self.assertEqual(stored[session_mod.AUTH_FLAG_KEY], "true")
        self.assertEqual(
            int(stored[session_mod.ISSUED_AT_KEY]),
            int(self.clock.now.timestamp() * 1000),
        )

    async def test_session_valid_just_before_24_hours(self):
        await self.store.save_session(USER)
        self.clock.advance(timedelta(hours=23, minutes=59, seconds=59))
        self.assertEqual(await self.store.get_current_user(), USER)

    async def test_session_expires_after_24_hours_and_is_evicted(self):
        await self.store.save_session(USER)
        self.clock.advance(timedelta(hours=24))

        self.assertIsNone(await self.store.get_current_user())
        self.assertFalse(await self.store.is_authenticated())
        stored = await local_storage.get_items(session_mod.SESSION_KEYS)
        self.assertEqual(set(stored.values()), {None})

    async def test_logout_removes_all_keys(self):
        await self.store.save_session(USER)
        await self.store.logout()
        self.assertIsNone(await self.store.get_current_user())
        stored = await local_storage.get_items(session_mod.SESSION_KEYS)
        self.assertEqual(set(stored.values()), {None})

    async def test_missing_flag_means_no_session(self):
        await self.store.save_session(USER)
        await local_storage.set_item(session_mod.AUTH_FLAG_KEY, "false")
        self.assertIsNone(await self.store.get_current_user())

    async def test_corrupt_user_record_is_discarded(self):
        await self.store.save_session(USER)
        await local_storage.set_item(session_mod.USER_KEY, "{not json")

        self.assertIsNone(await self.store.get_current_user())
        self.assertIsNone(await local_storage.get_item(session_mod.ISSUED_AT_KEY))

    async def test_wrong_shape_user_record_is_discarded(self):
        await self.store.save_session(USER)
        await local_storage.set_item(session_mod.USER_KEY, '{"id": "u1"}')
        self.assertIsNone(await self.store.get_current_user())

    async def test_storage_failure_reads_as_logged_out(self):
        with mock.patch.object(
            local_storage,
            "get_items",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            self.assertIsNone(await self.store.get_current_user())


class FakeAuthGateway:
    def __init__(self):
        self.calls = []

    async def login(self, email, password):
        self.calls.append(("login", email))
        if password != "secret":
            raise InvalidCredentials()
        return USER

    async def register(self, email, password, full_name, phone=None, address=None):
        self.calls.append(("register", email))
        return USER.model_copy(update={"email": email, "full_name": full_name})

    async def update_profile(self, user_id, full_name=None, phone=None, address=None):
        self.calls.append(("update_profile", user_id, full_name, phone, address))
        return USER.model_copy(update={"address": address})

    async def get_user_orders(self, user_id):
        self.calls.append(("get_user_orders", user_id))
        return []


class AuthServiceTests(LocalStorageTestCase):
    def setUp(self):
        super().setUp()
        self.gateway = FakeAuthGateway()
        self.store = SessionStore()
        self.auth = AuthService(self.gateway, self.store)

    async def test_login_caches_user(self):
        user = await self.auth.login("jane@example.com", "secret")
        self.assertEqual(self.auth.user, user)
        self.assertEqual(await self.store.get_current_user(), user)

        # a fresh service restores the cached session
        restored = AuthService(self.gateway, SessionStore())
        self.assertEqual(await restored.restore(), user)

    async def test_failed_login_leaves_no_session(self):
        with self.assertRaises(InvalidCredentials):
            await self.auth.login("jane@example.com", "wrong")
        self.assertIsNone(self.auth.user)
        self.assertIsNone(await self.store.get_current_user())

    async def test_register_caches_user(self):
        user = await self.auth.register("new@example.com", "pw", "New Person")
        self.assertEqual(user.email, "new@example.com")
        self.assertEqual((await self.store.get_current_user()).email, "new@example.com")

    async def test_update_profile_refreshes_cache(self):
        await self.auth.login("jane@example.com", "secret")
        updated = await self.auth.update_profile(address="Plot 4, Jinja Road")

        self.assertEqual(updated.address, "Plot 4, Jinja Road")
        self.assertEqual(
            (await self.store.get_current_user()).address, "Plot 4, Jinja Road"
        )
        self.assertEqual(
            self.gateway.calls[-1],
            ("update_profile", "u1", None, None, "Plot 4, Jinja Road"),
        )

    async def test_account_calls_require_user(self):
        with self.assertRaises(ValidationFailed):
            await self.auth.update_profile(full_name="X")
        with self.assertRaises(ValidationFailed):
            await self.auth.get_user_orders()
        self.assertEqual(self.gateway.calls, [])

    async def test_expired_session_drops_in_memory_user(self):
        clock = FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))
        auth = AuthService(self.gateway, SessionStore(clock=clock))
        await auth.login("jane@example.com", "secret")
        self.assertEqual(await auth.current_user(), auth.user)

        clock.advance(timedelta(hours=25))

        with self.assertRaises(SessionExpired) as ctx:
            await auth.get_user_orders()
        self.assertEqual(ctx.exception.field, "session")
        self.assertIsNone(auth.user)
        with self.assertRaises(ValidationFailed):
            await auth.update_profile(full_name="X")
        self.assertNotIn("get_user_orders", [c[0] for c in self.gateway.calls])
        self.assertNotIn("update_profile", [c[0] for c in self.gateway.calls])

    async def test_session_cleared_elsewhere_drops_user(self):
        await self.auth.login("jane@example.com", "secret")
        await self.store.logout()

        self.assertIsNone(await self.auth.current_user())
        self.assertIsNone(self.auth.user)

    async def test_logout(self):
        await self.auth.login("jane@example.com", "secret")
        await self.auth.logout()
        self.assertIsNone(self.auth.user)
        self.assertFalse(await self.store.is_authenticated())


if __name__ == "__main__":
    unittest.main()
