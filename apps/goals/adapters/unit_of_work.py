# apps/goals/adapters/unit_of_work.py
import logging
from contextlib import contextmanager
from django.db import transaction

logger = logging.getLogger(__name__)


@contextmanager
def django_unit_of_work(using=None):
    """
    Jedna atomowa jednostka pracy (transaction.atomic).
    Każdy błąd wycofuje całość i leci dalej bez zmian - żadnych częściowych zapisów,
    żadnych ponowień po naszej stronie.
    """
    try:
        with transaction.atomic(using=using):
            yield
    except Exception as e:
        logger.warning("Jednostka pracy wycofana: %s: %s", type(e).__name__, e)
        raise
