# apps/goals/adapters/orm_repositories.py
import logging
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID
from django.utils import timezone
from apps.goals.domain.entities import GoalEntity, GoalStatus, ProgressEntryEntity
from apps.goals.ports.repositories import IGoalRepository, IProgressLedger
from apps.goals.models import ReadingGoal as GoalModel, GoalProgressEntry

logger = logging.getLogger(__name__)


class DjangoGoalRepository(IGoalRepository):
    def to_entity(self, model: GoalModel) -> GoalEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return GoalEntity(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            target_count=model.target_count,
            progress_count=model.progress_count,
            bonus_count=model.bonus_count,
            status=GoalStatus(model.status),
            deadline_at_utc=model.deadline_at_utc,
            deadline_timezone=model.deadline_timezone,
            completed_at=model.completed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def get_by_id(self, goal_id: int) -> Optional[GoalEntity]:
        try:
            goal = GoalModel.objects.get(id=goal_id)
            return self.to_entity(goal)
        except GoalModel.DoesNotExist:
            return None

    # Blokady wierszy (select_for_update) muszą być brane wewnątrz transakcji.
    # Serializują przeliczanie liczników tego samego celu przez równoległe zdarzenia.

    def lock_active_for_user(self, user_id: int) -> List[GoalEntity]:
        qs = GoalModel.objects.for_user(user_id).active().select_for_update().in_processing_order()
        return [self.to_entity(g) for g in qs]

    def lock_referencing_entry(self, user_id: int, reading_entry_id: UUID) -> List[GoalEntity]:
        # Podzapytanie zamiast JOIN + DISTINCT (PostgreSQL nie pozwala na FOR UPDATE z DISTINCT)
        goal_ids = GoalProgressEntry.objects.filter(
            reading_entry_id=reading_entry_id
        ).values('goal_id')

        qs = GoalModel.objects.for_user(user_id).filter(
            id__in=goal_ids
        ).select_for_update().in_processing_order()
        return [self.to_entity(g) for g in qs]

    def lock_overdue(self, now: datetime) -> List[GoalEntity]:
        qs = GoalModel.objects.overdue(now).select_for_update().in_processing_order()
        return [self.to_entity(g) for g in qs]

    def save_progress(self, goal: GoalEntity) -> GoalEntity:
        if goal.id is None:
            raise ValueError("Goal must be persisted before saving progress")

        GoalModel.objects.filter(id=goal.id).update(
            progress_count=goal.progress_count,
            bonus_count=goal.bonus_count,
            status=goal.status.value,
            completed_at=goal.completed_at,
            updated_at=goal.updated_at or timezone.now(),
        )
        return self.to_entity(GoalModel.objects.get(id=goal.id))


class DjangoProgressLedger(IProgressLedger):
    def to_entity(self, model: GoalProgressEntry) -> ProgressEntryEntity:
        return ProgressEntryEntity(
            goal_id=model.goal_id,
            reading_entry_id=model.reading_entry_id,
            book_id=model.book_id,
            applied_at=model.applied_at,
            applied_from_state=model.applied_from_state,
        )

    def record_if_absent(self, goal_id: int, reading_entry_id: UUID, book_id: UUID,
                         applied_from_state: Optional[str] = None) -> bool:
        # get_or_create sam łapie IntegrityError przy wyścigu i pobiera istniejący wiersz
        _, created = GoalProgressEntry.objects.get_or_create(
            goal_id=goal_id,
            reading_entry_id=reading_entry_id,
            defaults={
                'book_id': book_id,
                'applied_from_state': applied_from_state,
            }
        )
        if not created:
            logger.debug("Wpis %s już zaliczony do celu %s, pomijam", reading_entry_id, goal_id)
        return created

    def count_for(self, goal_id: int) -> int:
        return GoalProgressEntry.objects.filter(goal_id=goal_id).count()

    def remove_by_reading_entry(self, reading_entry_id: UUID) -> Set[int]:
        qs = GoalProgressEntry.objects.filter(reading_entry_id=reading_entry_id)
        affected = set(qs.values_list('goal_id', flat=True))
        qs.delete()
        return affected

    def entries_for_goal(self, goal_id: int) -> List[ProgressEntryEntity]:
        qs = GoalProgressEntry.objects.filter(goal_id=goal_id).order_by('-applied_at', '-id')
        return [self.to_entity(e) for e in qs]

    def entries_for_reading_entry(self, reading_entry_id: UUID) -> List[ProgressEntryEntity]:
        qs = GoalProgressEntry.objects.filter(reading_entry_id=reading_entry_id).order_by('goal_id')
        return [self.to_entity(e) for e in qs]
