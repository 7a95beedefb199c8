from __future__ import annotations

from fastapi import HTTPException, Request


def get_current_user(request: Request) -> dict | None:
    """Return the signed-in user from the session, or ``None`` for anonymous visitors."""
    return request.session.get("user")


def require_user(request: Request) -> dict:
    """Raise 401 unless a user is signed in."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not signed in, 403 if the user is not an admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
