"""
Metabox configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Library settings from environment variables."""

    # Anti-forgery token
    NONCE_SECRET: str = os.environ.get("METABOX_NONCE_SECRET", "")
    NONCE_ACTION: str = os.environ.get("METABOX_NONCE_ACTION", "metabox_save")

    # Panel placement defaults
    CONTEXT: str = os.environ.get("METABOX_CONTEXT", "advanced")
    PRIORITY: str = os.environ.get("METABOX_PRIORITY", "default")

    # Storage mode: one composite record per panel unless turned off
    SERIALIZE: bool = os.environ.get("METABOX_SERIALIZE", "true").lower() not in ("0", "false", "no", "off")


settings = Settings()
