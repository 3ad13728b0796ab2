# api/routers/auth.py
import hmac
import logging
from fastapi import APIRouter, HTTPException, Depends, Request, status

from api.schemas.auth import AdminLoginRequest, AdminLoginResponse
from api.utils.auth import AuthUtils
from api.utils.body import read_json_body
from api.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/admin-login", response_model=AdminLoginResponse)
async def admin_login(
    request: Request,
    settings: Settings = Depends(get_settings)
):
    """
    Exchange the admin password for a signed token valid for 7 days
    """
    if not settings.admin_password or not settings.admin_jwt_secret:
        logger.error("Admin login is not configured (ADMIN_PASSWORD / ADMIN_JWT_SECRET)")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server not configured"
        )

    payload = await read_json_body(request, AdminLoginRequest)
    password = payload.password

    if not isinstance(password, str) or not password or not hmac.compare_digest(
        password.encode("utf-8"), settings.admin_password.encode("utf-8")
    ):
        logger.warning("Admin login failed: invalid password")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    issued = AuthUtils.issue_admin_token(settings.admin_jwt_secret)
    logger.info("Admin logged in")
    return AdminLoginResponse(**issued)
