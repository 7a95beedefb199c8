from __future__ import annotations

import json
from typing import Any

import bcrypt

from ..recommendations.models import UserPreferences

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _add_user(
    username: str,
    password: str,
    *,
    user_id: str,
    name: str,
    role: str = "user",
    favorites_cuisines: list[str] | None = None,
    dietary_restrictions: list[str] | None = None,
) -> None:
    # Preference lists are stored JSON-encoded, one string column each
    _users[username] = {
        "id": user_id,
        "name": name,
        "role": role,
        "password_hash": _hash_password(password),
        "favorites_cuisines": json.dumps(favorites_cuisines) if favorites_cuisines else None,
        "dietary_restrictions": json.dumps(dietary_restrictions) if dietary_restrictions else None,
    }


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _add_user(
        "user", "user123", user_id="u-user", name="Demo User",
        favorites_cuisines=["Italian"], dietary_restrictions=["Vegetarian"],
    )
    _add_user("admin", "admin123", user_id="u-admin", name="Admin", role="admin")


def _public(username: str, record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "username": username,
        "name": record["name"],
        "role": record["role"],
    }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, username, name, role}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username, record)
    return None


def _parse_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def get_preferences(username: str) -> UserPreferences:
    """Return the stored profile preferences, empty for unknown users."""
    record = _users.get(username)
    if not record:
        return UserPreferences()
    return UserPreferences(
        favorites_cuisines=_parse_list(record["favorites_cuisines"]),
        dietary_restrictions=_parse_list(record["dietary_restrictions"]),
    )


def update_preferences(
    username: str,
    favorites_cuisines: list[str] | None,
    dietary_restrictions: list[str] | None,
) -> UserPreferences:
    """Replace both preference columns; ``None`` or an empty list clears one."""
    record = _users.get(username)
    if record is None:
        raise KeyError(username)
    record["favorites_cuisines"] = json.dumps(favorites_cuisines) if favorites_cuisines else None
    record["dietary_restrictions"] = json.dumps(dietary_restrictions) if dietary_restrictions else None
    return get_preferences(username)


_seed_users()
