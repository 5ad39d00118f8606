"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.badge import Badge

FALLBACK_MEMBER_NAME = "Community Member"


@dataclass
class Profile:
    """Domain entity for user profile (synced from Supabase)."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    display_name: str | None = None
    bio: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class PublicProfile:
    """Read model for a member's community page."""

    profile: Profile
    badges: list[Badge] = field(default_factory=list)
    skill_count: int = 0
    hours_contributed: int = 0
