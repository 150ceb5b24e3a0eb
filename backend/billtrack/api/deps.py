"""
Request identity and role gating.

Sessions are issued by the upstream gateway, which forwards the caller's
display name and role as X-User-Name and X-User-Role.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException


@dataclass(frozen=True)
class CurrentUser:
    name: str
    role: str


async def get_current_user(
    x_user_name: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> CurrentUser:
    if not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    return CurrentUser(
        name=x_user_name or "Unknown User",
        role=x_user_role.strip().lower(),
    )


def require_roles(*roles: str):
    """Dependency factory: allow only callers holding one of roles."""

    async def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(
                status_code=403,
                detail="Access denied. Insufficient permissions.",
            )
        return user

    return _check


require_admin = require_roles("admin")
require_staff_or_admin = require_roles("staff", "admin")
