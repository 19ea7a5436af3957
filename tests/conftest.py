# tests/conftest.py
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.goals.models import ReadingGoal, GoalProgressEntry
from apps.goals.services import get_goal_progress_service


@pytest.fixture
def reader(django_user_model):
    return django_user_model.objects.create_user(username="reader", password="x")


@pytest.fixture
def other_reader(django_user_model):
    return django_user_model.objects.create_user(username="other", password="x")


@pytest.fixture
def service():
    return get_goal_progress_service()


@pytest.fixture
def make_goal():
    """Fabryka celów; domyślnie aktywny cel na 3 książki z terminem za 30 dni."""
    def _make(user, target_count=3, status=ReadingGoal.StatusChoices.ACTIVE, deadline=None, **extra):
        if deadline is None:
            deadline = timezone.now() + timedelta(days=30)
        if status == ReadingGoal.StatusChoices.COMPLETED:
            extra.setdefault('completed_at', timezone.now())
        return ReadingGoal.objects.create(
            user=user,
            name=extra.pop('name', f"Read {target_count} books"),
            target_count=target_count,
            status=status,
            deadline_at_utc=deadline,
            **extra
        )
    return _make


@pytest.fixture
def seed_ledger():
    """Dopisuje N wpisów do rejestru celu z pominięciem serwisu i ustawia zgodne liczniki."""
    def _seed(goal, count):
        for _ in range(count):
            GoalProgressEntry.objects.create(
                goal=goal,
                reading_entry_id=uuid.uuid4(),
                book_id=uuid.uuid4(),
            )
        total = goal.progress_entries.count()
        goal.progress_count = total
        goal.bonus_count = max(0, total - goal.target_count)
        goal.save()
        return goal
    return _seed
