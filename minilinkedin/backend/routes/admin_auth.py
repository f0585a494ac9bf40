import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException

from ..config import Settings, get_settings
from ..models import AdminLogin, AdminToken
from ..security import ROLE_ADMIN, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-auth"])


@router.post("/login", response_model=AdminToken)
async def admin_login(credentials: AdminLogin, settings: Settings = Depends(get_settings)):
    if not settings.admin_email or not settings.admin_password:
        raise HTTPException(status_code=503, detail="Admin access is not configured")

    email_ok = secrets.compare_digest(credentials.email.lower().encode(), settings.admin_email.lower().encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), settings.admin_password.encode())
    if not (email_ok and password_ok):
        logger.warning("Failed admin login for %s", credentials.email)
        raise HTTPException(status_code=401, detail="Invalid admin credentials")

    return AdminToken(token=create_access_token(settings, "admin", "Admin", role=ROLE_ADMIN))
