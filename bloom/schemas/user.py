"""Account schemas. Auth flows live outside this package; these are decode targets only."""

from typing import Any, Optional

from pydantic import Field

from .base import WireModel, decode_record


class User(WireModel):
    id: str
    email: str = ""
    name: str = ""
    avatar_url: Optional[str] = None
    energy: int = Field(default=0, ge=0)
    is_premium: bool = False
    provider: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AuthResponse(WireModel):
    user: User
    token: str


def decode_user(raw: Any) -> User:
    return decode_record(User, raw, ("id",))
