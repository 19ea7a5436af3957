# apps/goals/domain/services/transitions.py
from dataclasses import replace
from datetime import datetime

from apps.goals.domain.entities import GoalEntity, GoalStatus, TransitionDecision

NO_CHANGE = TransitionDecision(should_update=False)


def calculate_bonus(progress_count: int, target_count: int) -> int:
    """Książki przeczytane ponad cel."""
    return max(0, progress_count - target_count)


def decide_transition(goal: GoalEntity, now: datetime) -> TransitionDecision:
    """
    Czysta funkcja przejść statusu celu. Kolejność reguł ma znaczenie:
    1. COMPLETED / EXPIRED -> brak zmiany statusu (liczniki zapisuje wywołujący)
    2. progress >= target  -> COMPLETED, completed_at = now
    3. now > deadline      -> EXPIRED
    4. w przeciwnym razie  -> brak zmiany
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    if goal.status in (GoalStatus.COMPLETED, GoalStatus.EXPIRED):
        return NO_CHANGE

    # Osiągnięcie celu wygrywa z terminem sprawdzanym w tym samym przebiegu
    if goal.progress_count >= goal.target_count:
        return TransitionDecision(
            should_update=True,
            new_status=GoalStatus.COMPLETED,
            new_completed_at=now,
        )

    if now > goal.deadline_at_utc:
        return TransitionDecision(
            should_update=True,
            new_status=GoalStatus.EXPIRED,
            new_completed_at=None,
        )

    return NO_CHANGE


def apply_decision(goal: GoalEntity, decision: TransitionDecision) -> GoalEntity:
    if not decision.should_update:
        return goal
    return replace(goal, status=decision.new_status, completed_at=decision.new_completed_at)


def revert_on_uncompletion(goal: GoalEntity) -> GoalEntity:
    """
    Cofnięcie ukończenia: tylko COMPLETED z postępem poniżej celu wraca do ACTIVE.
    EXPIRED nigdy nie wraca (wygaśnięcie to fakt czasowy, nie zależy od postępu).
    """
    if goal.status == GoalStatus.COMPLETED and goal.progress_count < goal.target_count:
        return replace(goal, status=GoalStatus.ACTIVE, completed_at=None)
    return goal


def with_progress(goal: GoalEntity, progress_count: int) -> GoalEntity:
    return replace(
        goal,
        progress_count=progress_count,
        bonus_count=calculate_bonus(progress_count, goal.target_count),
    )
