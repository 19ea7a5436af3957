# apps/goals/domain/services/deadlines.py
from datetime import datetime

import pytz


def normalize_deadline(deadline: datetime, timezone_name: str = 'UTC') -> datetime:
    """
    Sprowadza termin celu do UTC.
    Naiwna data jest interpretowana w strefie czytelnika (timezone_name),
    data ze strefą jest tylko przeliczana. Strefa czytelnika to metadane do
    wyświetlania, nigdy nie bierze udziału w porównaniach.
    """
    if deadline.tzinfo is None:
        local_tz = pytz.timezone(timezone_name or 'UTC')
        deadline = local_tz.localize(deadline)
    return deadline.astimezone(pytz.UTC)
