# apps/goals/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from enum import Enum
from uuid import UUID


class GoalStatus(str, Enum):
    ACTIVE = 'active'
    COMPLETED = 'completed'
    EXPIRED = 'expired'


@dataclass
class GoalEntity:
    id: Optional[int]  # ID może być None przed zapisem
    user_id: int
    target_count: int
    deadline_at_utc: datetime
    name: str = ""

    # Liczniki pochodne (zawsze przeliczane z rejestru postępu)
    progress_count: int = 0
    bonus_count: int = 0

    status: GoalStatus = GoalStatus.ACTIVE
    deadline_timezone: str = "UTC"  # tylko do wyświetlania
    completed_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def progress_percentage(self) -> int:
        """Postęp w procentach (0-100), bonus nie przekracza 100."""
        if self.target_count <= 0:
            return 0
        return min(100, (self.progress_count * 100) // self.target_count)

    @property
    def is_active(self) -> bool:
        return self.status == GoalStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == GoalStatus.COMPLETED

    @property
    def is_expired(self) -> bool:
        return self.status == GoalStatus.EXPIRED

    @property
    def has_bonus(self) -> bool:
        return self.bonus_count > 0


@dataclass
class ProgressEntryEntity:
    goal_id: int
    reading_entry_id: UUID
    book_id: UUID
    applied_at: Optional[datetime] = None
    applied_from_state: Optional[str] = None  # status wpisu przed "finished" (audyt)


@dataclass(frozen=True)
class TransitionDecision:
    should_update: bool
    new_status: Optional[GoalStatus] = None
    new_completed_at: Optional[datetime] = None
