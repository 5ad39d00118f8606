"""Shared guard for operations that need an authenticated caller."""

from uuid import UUID

from core.exceptions import AuthenticationError


def require_principal(user_id: UUID | None) -> UUID:
    """Return ``user_id`` or raise if there is no authenticated caller."""
    if user_id is None:
        raise AuthenticationError()
    return user_id
