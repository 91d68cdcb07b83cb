import os
import sys
import unittest
from unittest import mock

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils import config  # noqa: E402


class LoadSettingsTests(unittest.TestCase):
    def load(self, env):
        with mock.patch.dict(os.environ, env, clear=True), mock.patch.object(
            config, "load_dotenv"
        ):
            return config.load_settings()

    def test_defaults_without_environment(self):
        settings = self.load({})
        self.assertFalse(settings.is_configured)
        self.assertEqual(settings.db_path, config.DEFAULT_DB_PATH)
        self.assertEqual(settings.whatsapp_number, "256741068782")
        self.assertEqual(settings.store_name, "M.A Online Store")

    def test_real_values_are_configured(self):
        settings = self.load(
            {
                "SUPABASE_URL": " https://abc.supabase.co/ ",
                "SUPABASE_ANON_KEY": "eyJ-real-key",
                "WHATSAPP_NUMBER": "+256700000000",
                "STORE_NAME": "Corner Shop",
            }
        )
        self.assertTrue(settings.is_configured)
        self.assertEqual(settings.supabase_url, "https://abc.supabase.co")
        self.assertEqual(settings.whatsapp_number, "256700000000")
        self.assertEqual(settings.store_name, "Corner Shop")

    def test_placeholder_values_are_not_configured(self):
        settings = self.load(
            {
                "SUPABASE_URL": "https://your-project-ref.supabase.co",
                "SUPABASE_ANON_KEY": "real",
            }
        )
        self.assertFalse(settings.is_configured)

        settings = self.load(
            {"SUPABASE_URL": "https://abc.supabase.co", "SUPABASE_ANON_KEY": "your-anon-key"}
        )
        self.assertFalse(settings.is_configured)


if __name__ == "__main__":
    unittest.main()
