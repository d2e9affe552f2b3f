from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from achievements.config import Settings
from achievements.repository import SchoolStore
from achievements.security import student_id_from_token


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SchoolStore:
    """The store built by create_app(); tests swap it through app.state or dependency_overrides."""
    return request.app.state.store


def get_caller_id(
    authorization: Optional[str] = Header(default=None),
    config: Settings = Depends(get_settings),
) -> Optional[str]:
    """Caller identity from a bearer JWT, or None when the request is unauthenticated."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return student_id_from_token(token, config)


def require_admin_token(
    x_admin_token: Optional[str] = Header(default=None),
    config: Settings = Depends(get_settings),
) -> None:
    if not config.ADMIN_TOKEN:
        raise HTTPException(status_code=404, detail="Not found")
    if x_admin_token != config.ADMIN_TOKEN:
        raise HTTPException(status_code=403, detail="Permission denied")
