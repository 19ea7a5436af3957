# apps/goals/domain/services/goal_progress_service.py
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, ContextManager, List, Optional
from uuid import UUID
from django.utils import timezone
from apps.goals.domain.entities import GoalEntity, GoalStatus
from apps.goals.domain.services.transitions import (
    apply_decision,
    decide_transition,
    revert_on_uncompletion,
    with_progress,
)
from apps.goals.ports.repositories import IGoalRepository, IProgressLedger

logger = logging.getLogger(__name__)


class GoalProgressService:
    """
    Utrzymuje cele czytelnicze w zgodzie z cyklem życia wpisów czytelniczych.
    progress_count i bonus_count są zawsze przeliczane z rejestru postępu
    w tej samej jednostce pracy, w której zapisujemy cel.
    """

    def __init__(self, goals: IGoalRepository, ledger: IProgressLedger,
                 unit_of_work: Callable[[], ContextManager],
                 clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.ledger = ledger
        self.unit_of_work = unit_of_work
        self.clock = clock

    def on_book_completed(self, user_id: int, reading_entry_id: UUID, book_id: UUID,
                          from_state: Optional[str] = None) -> List[GoalEntity]:
        """Książka przeczytana -> zalicz ją do wszystkich AKTYWNYCH celów usera."""
        if user_id is None:
            raise ValueError("user_id is required")

        updated = []
        with self.unit_of_work():
            now = self.clock()

            # 1. Aktywne cele usera (od najstarszego). Ukończone i wygasłe pomijamy w całości.
            for goal in self.goals.lock_active_for_user(user_id):
                # 2. Wpis w rejestrze (idempotentnie) ZAWSZE przed liczeniem
                self.ledger.record_if_absent(goal.id, reading_entry_id, book_id, from_state)

                # 3. Liczniki z rejestru
                goal = with_progress(goal, self.ledger.count_for(goal.id))

                # 4. Przejście statusu (zmieniamy status tylko gdy decyzja tak mówi)
                decision = decide_transition(goal, now)
                goal = apply_decision(goal, decision)

                saved = self.goals.save_progress(replace(goal, updated_at=now))
                if decision.should_update:
                    logger.info("Cel %s: %s (%s/%s)", saved.id, saved.status.value,
                                saved.progress_count, saved.target_count)
                updated.append(saved)

        return updated

    def on_book_uncompleted(self, user_id: int, reading_entry_id: UUID) -> List[GoalEntity]:
        """Książka przestała być przeczytana (lub wpis usunięto) -> cofnij jej zaliczenie."""
        if user_id is None:
            raise ValueError("user_id is required")

        updated = []
        with self.unit_of_work():
            now = self.clock()

            # 1. Cele usera, do których ta książka była zaliczona (filtr własności tutaj)
            affected = self.goals.lock_referencing_entry(user_id, reading_entry_id)

            # 2. Usuń wpisy z rejestru (globalnie, bez filtra po userze)
            removed_from = self.ledger.remove_by_reading_entry(reading_entry_id)
            foreign = removed_from - {g.id for g in affected}
            if foreign:
                logger.warning(
                    "Wpis %s był zaliczony do cudzych celów %s (user %s) - nie przeliczam ich",
                    reading_entry_id, sorted(foreign), user_id
                )

            for goal in affected:
                # 3. Przelicz po usunięciu
                goal = with_progress(goal, self.ledger.count_for(goal.id))

                # 4. COMPLETED poniżej celu wraca do ACTIVE; EXPIRED zostaje EXPIRED
                reverted = revert_on_uncompletion(goal)
                if reverted.status != goal.status:
                    logger.info("Cel %s wraca do aktywnych (%s/%s)", goal.id,
                                goal.progress_count, goal.target_count)

                updated.append(self.goals.save_progress(replace(reverted, updated_at=now)))

        return updated

    def expire_overdue_goals(self) -> List[int]:
        """
        Przegląd okresowy (np. co godzinę): ta sama reguła przejść co przy zdarzeniach.
        Cel, który osiągnął target, zostaje ukończony, a nie wygaszony.
        Zwraca ID celów, które wygasły.
        """
        expired_ids = []
        with self.unit_of_work():
            now = self.clock()

            for goal in self.goals.lock_overdue(now):
                goal = with_progress(goal, self.ledger.count_for(goal.id))
                decision = decide_transition(goal, now)
                goal = apply_decision(goal, decision)

                saved = self.goals.save_progress(replace(goal, updated_at=now))
                if saved.status == GoalStatus.EXPIRED:
                    expired_ids.append(saved.id)
                elif decision.should_update:
                    logger.info("Przegląd: cel %s ukończony zamiast wygaszony", saved.id)

        logger.info("Przegląd terminów: wygaszono %s celów", len(expired_ids))
        return expired_ids
