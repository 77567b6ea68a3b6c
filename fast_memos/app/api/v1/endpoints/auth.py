"""
Authentication endpoints for API v1.

Registration and login are public; ``/me`` echoes the identity carried by
the bearer token.
"""

from fastapi import APIRouter, Depends, status

from fast_memos.app.api.deps import get_current_user_id, get_token_service, get_user_service
from fast_memos.app.core.security import TokenService
from fast_memos.app.schemas.user import TokenResponse, UserCreate, UserLogin, UserRead
from fast_memos.app.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new user.

    Returns 400 when the username is shorter than 3 characters or the
    password shorter than 6, and 409 when the username is taken.
    """
    return users.register(payload.username, payload.password)


@router.post("/login", response_model=TokenResponse)
def login_user(
    payload: UserLogin,
    users: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    """Check the credentials and return a bearer token (401 on mismatch)."""
    user = users.authenticate(payload.username, payload.password)
    return TokenResponse(token=tokens.issue(user.id))


@router.get("/me", response_model=UserRead)
def read_current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
) -> UserRead:
    return users.get_by_id(user_id)
