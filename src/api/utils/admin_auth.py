"""
Admin Role Authorization

Guards the fraud, audit and system administration endpoints.
"""

from fastapi import Depends, status
from libs.result import Error
from src.api.error import ClientError
from src.depends import get_current_user
from src.domain.entities import UserRole


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Require an authenticated caller whose JWT role is admin.

    Raises:
        ClientError: 403 if the caller is not an admin

    Returns:
        The decoded JWT payload
    """
    if current_user.get("role") != UserRole.admin.value:
        raise ClientError(
            Error("INSUFFICIENT_ROLE", "Admin role required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    return current_user
