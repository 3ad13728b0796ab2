# frontend/session.py
import time
import logging
from typing import MutableMapping, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "wm_admin_token"
EXPIRY_KEY = "wm_admin_exp"


class AdminSession:
    """
    Admin credential held for the lifetime of one browsing session

    The session is backed by a session-scoped storage mapping (the browser's
    sessionStorage, or a plain dict) and passed explicitly to every UI
    controller that needs it.
    """

    def __init__(self, storage: Optional[MutableMapping[str, str]] = None):
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}
        self.token: Optional[str] = None
        self.expires_at: int = 0
        self.load()

    def load(self) -> None:
        """Restore token and expiry from storage"""
        self.token = self.storage.get(TOKEN_KEY) or None
        try:
            self.expires_at = int(float(self.storage.get(EXPIRY_KEY) or 0))
        except ValueError:
            self.expires_at = 0

    def start(self, token: str, expires_at: Optional[int] = None) -> None:
        self.token = token
        self.expires_at = int(expires_at or 0)
        self.storage[TOKEN_KEY] = token
        self.storage[EXPIRY_KEY] = str(self.expires_at)
        logger.info("Admin session started")

    def end(self) -> None:
        self.token = None
        self.expires_at = 0
        self.storage.pop(TOKEN_KEY, None)
        self.storage.pop(EXPIRY_KEY, None)
        logger.info("Admin session ended")

    def is_active(self, now_ms: Optional[int] = None) -> bool:
        if not self.token:
            return False
        if not self.expires_at:
            return True
        now_ms = int(time.time() * 1000) if now_ms is None else now_ms
        return now_ms < self.expires_at
