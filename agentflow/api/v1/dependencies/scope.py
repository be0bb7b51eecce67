"""Request scope dependencies: team, acting user and the internal token."""

from __future__ import annotations

import re
import secrets

from fastapi import HTTPException, Request

from agentflow.core.config import get_settings

_TEAM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def is_valid_team_id_format(value: str) -> bool:
    return bool(_TEAM_ID_PATTERN.match(value))


async def get_team_id(request: Request) -> str:
    """Team scope from the team header (required)."""
    name = get_settings().team_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(status_code=400, detail=f"Missing required header: {name}")
    if not is_valid_team_id_format(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid team ID format (alphanumeric, hyphen, underscore; max 64 chars)",
        )
    return value


async def get_user_id(request: Request) -> str | None:
    """Acting user from the user header; None for system calls."""
    return request.headers.get(get_settings().user_header_name) or None


async def require_internal_token(request: Request) -> None:
    """Guard for /internal routes. Routes are hidden (404) when no token is configured."""
    settings = get_settings()
    expected = settings.internal_api_token
    if expected is None or not expected.get_secret_value():
        raise HTTPException(status_code=404, detail="Not Found")
    supplied = request.headers.get(settings.internal_token_header_name) or ""
    if not secrets.compare_digest(supplied.encode(), expected.get_secret_value().encode()):
        raise HTTPException(status_code=401, detail="Invalid internal token")
