# tests/goals/test_service_orchestration.py
# Serwis na atrapach portów: kolejność operacji i granice jednostki pracy, bez bazy.
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from apps.goals.domain.entities import GoalEntity, GoalStatus
from apps.goals.domain.services import GoalProgressService
from apps.goals.ports.repositories import IGoalRepository, IProgressLedger

NOW = datetime(2026, 5, 10, 8, 30, tzinfo=timezone.utc)


class FakeGoals(IGoalRepository):
    def __init__(self, journal, goals):
        self.journal = journal
        self.rows = {g.id: g for g in goals}

    def get_by_id(self, goal_id):
        return self.rows.get(goal_id)

    def lock_active_for_user(self, user_id):
        self.journal.append(('lock_active', user_id))
        return [g for g in self.rows.values() if g.user_id == user_id and g.status == GoalStatus.ACTIVE]

    def lock_referencing_entry(self, user_id, reading_entry_id):
        self.journal.append(('lock_referencing', user_id))
        return [g for g in self.rows.values() if g.user_id == user_id]

    def lock_overdue(self, now):
        return [g for g in self.rows.values() if g.status == GoalStatus.ACTIVE and g.deadline_at_utc < now]

    def save_progress(self, goal):
        self.journal.append(('save', goal.id))
        self.rows[goal.id] = goal
        return goal


class FakeLedger(IProgressLedger):
    def __init__(self, journal):
        self.journal = journal
        self.entries = set()

    def record_if_absent(self, goal_id, reading_entry_id, book_id, applied_from_state=None):
        self.journal.append(('record', goal_id))
        key = (goal_id, reading_entry_id)
        created = key not in self.entries
        self.entries.add(key)
        return created

    def count_for(self, goal_id):
        self.journal.append(('count', goal_id))
        return sum(1 for g, _ in self.entries if g == goal_id)

    def remove_by_reading_entry(self, reading_entry_id):
        self.journal.append(('remove', reading_entry_id))
        affected = {g for g, r in self.entries if r == reading_entry_id}
        self.entries = {(g, r) for g, r in self.entries if r != reading_entry_id}
        return affected

    def entries_for_goal(self, goal_id):
        return []

    def entries_for_reading_entry(self, reading_entry_id):
        return []


@pytest.fixture
def journal():
    return []


@pytest.fixture
def make_service(journal):
    def _make(*goals):
        @contextmanager
        def unit_of_work():
            journal.append(('begin',))
            yield
            journal.append(('commit',))

        return GoalProgressService(
            goals=FakeGoals(journal, goals),
            ledger=FakeLedger(journal),
            unit_of_work=unit_of_work,
            clock=lambda: NOW,
        )
    return _make


def entity(goal_id, target=2, **kw):
    return GoalEntity(id=goal_id, user_id=7, target_count=target,
                      deadline_at_utc=NOW + timedelta(days=3), **kw)


def test_each_goal_records_before_counting(make_service, journal):
    service = make_service(entity(1), entity(2))

    service.on_book_completed(7, uuid.uuid4(), uuid.uuid4())

    assert journal == [
        ('begin',),
        ('lock_active', 7),
        ('record', 1), ('count', 1), ('save', 1),
        ('record', 2), ('count', 2), ('save', 2),
        ('commit',),
    ]


def test_uncompletion_selects_goals_before_deleting(make_service, journal):
    service = make_service(entity(1))
    entry_id = uuid.uuid4()
    service.on_book_completed(7, entry_id, uuid.uuid4())
    journal.clear()

    service.on_book_uncompleted(7, entry_id)

    assert journal == [
        ('begin',),
        ('lock_referencing', 7),
        ('remove', entry_id),
        ('count', 1), ('save', 1),
        ('commit',),
    ]


def test_clock_drives_completion_and_updated_at(make_service):
    service = make_service(entity(1, target=1))

    [goal] = service.on_book_completed(7, uuid.uuid4(), uuid.uuid4())

    assert goal.status == GoalStatus.COMPLETED
    assert goal.completed_at == NOW
    assert goal.updated_at == NOW


def test_completed_goal_keeps_completed_at_when_recounted(make_service):
    done_at = NOW - timedelta(days=1)
    goal = entity(1, target=1, status=GoalStatus.COMPLETED, completed_at=done_at)
    service = make_service(goal)
    entry_id = uuid.uuid4()
    service.ledger.entries = {(1, entry_id), (1, uuid.uuid4())}

    [after] = service.on_book_uncompleted(7, entry_id)

    assert (after.progress_count, after.bonus_count) == (1, 0)
    assert after.status == GoalStatus.COMPLETED
    assert after.completed_at == done_at


def test_sweep_uses_transition_rule(make_service):
    overdue = replace(entity(1, target=5), deadline_at_utc=NOW - timedelta(hours=2))
    reached = replace(entity(2, target=1), deadline_at_utc=NOW - timedelta(hours=2))
    service = make_service(overdue, reached)
    service.ledger.entries = {(2, uuid.uuid4())}

    assert service.expire_overdue_goals() == [1]
    assert service.goals.rows[1].status == GoalStatus.EXPIRED
    assert service.goals.rows[2].status == GoalStatus.COMPLETED
