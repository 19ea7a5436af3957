# apps/goals/services.py
from apps.goals.adapters.orm_repositories import DjangoGoalRepository, DjangoProgressLedger
from apps.goals.adapters.unit_of_work import django_unit_of_work
from apps.goals.domain.services import GoalProgressService


def get_goal_progress_service() -> GoalProgressService:
    """Serwis postępu celów spięty z ORM Django."""
    return GoalProgressService(
        goals=DjangoGoalRepository(),
        ledger=DjangoProgressLedger(),
        unit_of_work=django_unit_of_work,
    )
