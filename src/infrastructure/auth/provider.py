"""Identity provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenUser:
    """The authenticated principal behind a request."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Resolves bearer tokens to principals."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the principal for ``token``, or None if it is not valid."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for ``user`` (local HS256, used by tests and tooling)."""
        ...
