# tests/goals/test_expire_overdue_goals.py
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.goals.models import ReadingGoal

pytestmark = pytest.mark.django_db


def test_sweep_expires_only_overdue_active_goals(service, reader, other_reader, make_goal):
    past = timezone.now() - timedelta(hours=1)
    overdue = make_goal(reader, deadline=past)
    overdue_other = make_goal(other_reader, deadline=past)
    current = make_goal(reader)
    already_done = make_goal(reader, status=ReadingGoal.StatusChoices.COMPLETED, deadline=past)

    expired_ids = service.expire_overdue_goals()

    assert expired_ids == [overdue.id, overdue_other.id]
    overdue.refresh_from_db()
    assert overdue.status == ReadingGoal.StatusChoices.EXPIRED
    assert overdue.completed_at is None
    current.refresh_from_db()
    assert current.status == ReadingGoal.StatusChoices.ACTIVE
    already_done.refresh_from_db()
    assert already_done.status == ReadingGoal.StatusChoices.COMPLETED


def test_sweep_completes_goal_that_reached_target(service, reader, make_goal, seed_ledger):
    # Cel po terminie, ale z osiągniętym targetem: reguła przejść, nie samo porównanie dat
    goal = seed_ledger(make_goal(reader, target_count=2, deadline=timezone.now() - timedelta(hours=1)), 2)

    assert service.expire_overdue_goals() == []

    goal.refresh_from_db()
    assert goal.status == ReadingGoal.StatusChoices.COMPLETED
    assert goal.completed_at is not None


def test_sweep_is_repeatable(service, reader, make_goal):
    make_goal(reader, deadline=timezone.now() - timedelta(minutes=1))

    assert len(service.expire_overdue_goals()) == 1
    assert service.expire_overdue_goals() == []


def test_management_command_reports_expired_goals(reader, make_goal):
    goal = make_goal(reader, deadline=timezone.now() - timedelta(days=1))
    out = StringIO()

    call_command('expire_overdue_goals', stdout=out)

    assert 'Wygaszono 1 celów' in out.getvalue()
    assert f'cel #{goal.id}' in out.getvalue()
