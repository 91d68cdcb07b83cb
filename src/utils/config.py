"""Environment-driven configuration for the storefront."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

PLACEHOLDER_MARKERS = ("your-project-ref", "your-anon-key")

DEFAULT_DB_PATH = "data/storefront.sqlite"
DEFAULT_WHATSAPP_NUMBER = "256741068782"
DEFAULT_STORE_NAME = "M.A Online Store"


def _is_placeholder(value: str) -> bool:
    return any(marker in value for marker in PLACEHOLDER_MARKERS)


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: str
    supabase_key: str
    db_path: str = DEFAULT_DB_PATH
    whatsapp_number: str = DEFAULT_WHATSAPP_NUMBER
    store_name: str = DEFAULT_STORE_NAME

    @property
    def is_configured(self) -> bool:
        """True when the remote service URL and key are real values."""
        if not self.supabase_url or not self.supabase_key:
            return False
        return not (
            _is_placeholder(self.supabase_url) or _is_placeholder(self.supabase_key)
        )


def load_settings() -> Settings:
    """Load .env (if present) and environment variables into Settings."""
    load_dotenv()

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", "").strip().rstrip("/"),
        supabase_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        db_path=os.getenv("STOREFRONT_DB_PATH", DEFAULT_DB_PATH),
        whatsapp_number=os.getenv("WHATSAPP_NUMBER", DEFAULT_WHATSAPP_NUMBER).lstrip(
            "+"
        ),
        store_name=os.getenv("STORE_NAME", DEFAULT_STORE_NAME),
    )
