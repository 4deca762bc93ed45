from typing import Optional

from fastapi import Header, Request

from taskapi.errors import Unauthorized
from taskapi.services.auth import AuthService
from taskapi.stores.base import TaskStore


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_user_id(request: Request, authorization: Optional[str] = Header(None)) -> int:
    if not authorization:
        raise Unauthorized("missing authorization header")
    token = _extract_token(authorization)
    if not token:
        raise Unauthorized("authorization header must be: Bearer <token>")
    return request.app.state.token_issuer.validate(token)
