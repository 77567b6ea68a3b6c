"""
Pydantic models for user data.

Defines schemas for registering, logging in and reading user
information.  Password hashes never leave the service layer.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a user.

    Length rules (username at least 3 characters, password at least 6) are
    enforced by ``UserService.register`` so that violations surface as
    400 responses with a readable message.
    """

    username: str = Field("", examples=["alice"])
    password: str = Field("", examples=["strongpassword"])


class UserLogin(BaseModel):
    username: str = Field("", examples=["alice"])
    password: str = Field("", examples=["strongpassword"])


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str
    username: str

    model_config = {
        "from_attributes": True,
    }


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
