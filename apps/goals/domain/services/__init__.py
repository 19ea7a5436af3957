# apps/goals/domain/services/__init__.py
from .transitions import calculate_bonus, decide_transition, revert_on_uncompletion
from .deadlines import normalize_deadline
from .goal_progress_service import GoalProgressService

__all__ = [
    'calculate_bonus',
    'decide_transition',
    'revert_on_uncompletion',
    'normalize_deadline',
    'GoalProgressService',
]
