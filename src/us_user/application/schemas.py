"""Pydantic request/response schemas for user records.

All JSON responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, EmailStr, Field

from src.us_user.domain.models import User

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr


class UpdateUserRequest(BaseModel):
    email: EmailStr
    # Accepted for client compatibility; the path parameter is authoritative.
    username: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    id: int
    username: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, email=user.email)
