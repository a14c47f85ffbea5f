import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from kickoff.core.config import settings


async def require_admin(x_admin_password: Optional[str] = Header(None)) -> None:
    """
    Guards the routes that change the tournament.
    The admin password is a single shared secret taken from the settings.
    """
    if x_admin_password is None or not secrets.compare_digest(x_admin_password, settings.ADMIN_PASSWORD):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin password",
        )
