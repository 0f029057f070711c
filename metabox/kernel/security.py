"""
Metabox Kernel — Save Eligibility

Decides whether a save request may mutate storage. Autosaves and revision
snapshots never write panel values. NonceEligibility additionally requires
the hidden anti-forgery token the panel renders.
"""

from __future__ import annotations

import hashlib
import hmac

from metabox.config import settings
from metabox.kernel.hooks import SaveRequest
from metabox.kernel.storage import ContentId


class SaveEligibility:
    """
    Base check: skip autosaves and revisions, accept everything else.
    Issues no token, so the panel renders no hidden input.
    """

    def token_for(self, content_id: ContentId) -> str | None:
        return None

    def rejection(self, content_id: ContentId, request: SaveRequest, nonce_field: str) -> str | None:
        """Why the save must not proceed, or None if it may."""
        if request.is_autosave:
            return "autosave"
        if request.is_revision:
            return "revision"
        return None

    def allows(self, content_id: ContentId, request: SaveRequest, nonce_field: str) -> bool:
        return self.rejection(content_id, request, nonce_field) is None


class NonceEligibility(SaveEligibility):
    """HMAC-SHA256 token over "action:content_id"."""

    def __init__(self, secret: str, action: str = "metabox_save") -> None:
        if not secret:
            raise ValueError("NonceEligibility requires a non-empty secret")
        self.secret = secret
        self.action = action

    @classmethod
    def from_settings(cls) -> NonceEligibility:
        return cls(settings.NONCE_SECRET, settings.NONCE_ACTION)

    def token_for(self, content_id: ContentId) -> str:
        message = f"{self.action}:{content_id}".encode()
        return hmac.new(self.secret.encode(), message, hashlib.sha256).hexdigest()

    def verify(self, content_id: ContentId, token: object) -> bool:
        if not isinstance(token, str) or not token:
            return False
        return hmac.compare_digest(self.token_for(content_id).encode(), token.encode())

    def rejection(self, content_id: ContentId, request: SaveRequest, nonce_field: str) -> str | None:
        reason = super().rejection(content_id, request, nonce_field)
        if reason is not None:
            return reason
        if not self.verify(content_id, request.payload.get(nonce_field)):
            return "invalid_nonce"
        return None
