"""Badge domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Badge:
    """An achievement shown on a member's profile. Read-only here."""

    user_id: UUID
    badge_type: str
    badge_name: str
    id: UUID = field(default_factory=uuid4)
    earned_at: datetime = field(default_factory=datetime.utcnow)
