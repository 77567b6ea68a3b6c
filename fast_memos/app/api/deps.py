"""
FastAPI dependencies shared by the v1 endpoints.

The storage handle and token service live on ``app.state`` (set by
``create_app``); services are built per request around that shared
handle.  ``get_current_user_id`` turns an ``Authorization: Bearer``
header into the caller's user id.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fast_memos.app.core.db import Database
from fast_memos.app.core.errors import AuthError, NotFound
from fast_memos.app.core.security import TokenService
from fast_memos.app.services.memo_service import MemoService
from fast_memos.app.services.user_service import UserService


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_memo_service(db: Database = Depends(get_db)) -> MemoService:
    return MemoService(db)


security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    users: UserService = Depends(get_user_service),
) -> str:
    """Dependency that returns the authenticated user's id.

    A missing header, a non-bearer scheme, an invalid or expired token and
    a token whose subject no longer exists all raise ``AuthError`` (401).
    """
    if credentials is None:
        raise AuthError("Missing or malformed JWT")
    user_id = tokens.validate(credentials.credentials)
    try:
        users.get_by_id(user_id)
    except NotFound as exc:
        raise AuthError("User no longer exists") from exc
    return user_id
