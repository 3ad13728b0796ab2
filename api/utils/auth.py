# api/utils/auth.py
import re
import hmac
import json
import time
import base64
import hashlib
import logging
from typing import Optional, Dict, Any
from fastapi import HTTPException, Depends, Request, status

from api.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
ADMIN_TOKEN_TTL_MS = 7 * 24 * 60 * 60 * 1000  # 7 days

_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def now_ms() -> int:
    return int(time.time() * 1000)


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


class AuthUtils:
    """Signed admin token management (payload.signature, HMAC-SHA256)"""

    @staticmethod
    def _signature(payload_segment: str, secret: str) -> str:
        digest = hmac.new(secret.encode("utf-8"), payload_segment.encode("ascii"), hashlib.sha256).digest()
        return _b64url_encode(digest)

    @staticmethod
    def sign_token(claims: Dict[str, Any], secret: str) -> str:
        """Encode claims and append their keyed digest"""
        payload = _b64url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{AuthUtils._signature(payload, secret)}"

    @staticmethod
    def verify_token(token: Optional[str], secret: str) -> Optional[Dict[str, Any]]:
        """Return the claims of a genuine, unexpired token, otherwise None"""
        if not token or not isinstance(token, str):
            return None

        parts = token.split(".")
        if len(parts) != 2:
            return None
        payload, sig = parts

        try:
            expected = AuthUtils._signature(payload, secret)
        except UnicodeEncodeError:
            return None
        if not hmac.compare_digest(sig.encode("utf-8"), expected.encode("ascii")):
            return None

        try:
            data = json.loads(_b64url_decode(payload).decode("utf-8"))
        except (ValueError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None

        exp = data.get("exp")
        if exp:
            if isinstance(exp, bool) or not isinstance(exp, (int, float)):
                return None
            if now_ms() > exp:
                return None
        return data

    @staticmethod
    def issue_admin_token(secret: str) -> Dict[str, Any]:
        expires_at = now_ms() + ADMIN_TOKEN_TTL_MS
        token = AuthUtils.sign_token({"role": ADMIN_ROLE, "exp": expires_at}, secret)
        return {"token": token, "expiresAt": expires_at}


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the credential out of an 'Authorization: Bearer <token>' header"""
    if not authorization:
        return None
    match = _BEARER_RE.match(str(authorization))
    return match.group(1) if match else None


def authorize_admin(authorization: Optional[str], settings: Settings) -> Dict[str, Any]:
    """Validate an admin bearer credential, raising HTTPException on failure"""
    if not settings.admin_jwt_secret:
        logger.error("ADMIN_JWT_SECRET is not set")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server not configured"
        )

    token = get_bearer_token(authorization)
    claims = AuthUtils.verify_token(token, settings.admin_jwt_secret)
    if not claims or claims.get("role") != ADMIN_ROLE:
        logger.warning(f"Rejected admin credential (header {'present' if authorization else 'missing'})")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return claims


# Authentication dependency
def require_admin(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """
    Dependency guarding admin-only routes
    Usage: claims: dict = Depends(require_admin)
    """
    return authorize_admin(request.headers.get("authorization"), settings)
