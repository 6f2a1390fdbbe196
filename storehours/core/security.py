import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from storehours.core.config import settings

logger = logging.getLogger(__name__)


def require_admin(x_api_key: Optional[str] = Header(None, alias="X-API-Key")) -> None:
    """guard for the admin routes, checks X-API-Key against ADMIN_API_KEY when one is configured"""
    expected = settings.ADMIN_API_KEY
    if not expected:
        return
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        logger.warning("rejected admin request: %s api key", "invalid" if x_api_key else "missing")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="admin api key required")
