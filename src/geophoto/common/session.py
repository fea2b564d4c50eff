from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class AuthSession:
    """The authenticated caller of a request, passed explicitly into services."""

    user_id: UUID
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "AuthSession":
        return cls(user_id=user.user_id, email=user.email)
