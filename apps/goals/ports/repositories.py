# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID
from apps.goals.domain.entities import GoalEntity, ProgressEntryEntity


class IGoalRepository(ABC):
    @abstractmethod
    def get_by_id(self, goal_id: int) -> Optional[GoalEntity]:
        pass

    @abstractmethod
    def lock_active_for_user(self, user_id: int) -> List[GoalEntity]:
        """Zwraca (i blokuje do końca transakcji) aktywne cele usera, od najstarszego."""
        pass

    @abstractmethod
    def lock_referencing_entry(self, user_id: int, reading_entry_id: UUID) -> List[GoalEntity]:
        """Cele usera, do których zaliczono dany wpis czytelniczy (z blokadą)."""
        pass

    @abstractmethod
    def lock_overdue(self, now: datetime) -> List[GoalEntity]:
        """Aktywne cele po terminie (z blokadą)."""
        pass

    @abstractmethod
    def save_progress(self, goal: GoalEntity) -> GoalEntity:
        """Zapisuje liczniki, status i completed_at; zwraca stan z bazy."""
        pass


class IProgressLedger(ABC):
    @abstractmethod
    def record_if_absent(self, goal_id: int, reading_entry_id: UUID, book_id: UUID,
                         applied_from_state: Optional[str] = None) -> bool:
        """Dodaje wpis (goal, reading_entry); duplikat to cichy no-op. Zwraca True gdy utworzono."""
        pass

    @abstractmethod
    def count_for(self, goal_id: int) -> int:
        pass

    @abstractmethod
    def remove_by_reading_entry(self, reading_entry_id: UUID) -> Set[int]:
        """
        Usuwa wpisy danej książki ze WSZYSTKICH celów i zwraca ID dotkniętych celów.
        Bez filtra po userze - wywołujący sam weryfikuje własność celów.
        """
        pass

    @abstractmethod
    def entries_for_goal(self, goal_id: int) -> List[ProgressEntryEntity]:
        pass

    @abstractmethod
    def entries_for_reading_entry(self, reading_entry_id: UUID) -> List[ProgressEntryEntity]:
        pass
