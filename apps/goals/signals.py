# apps/goals/signals.py
from django.dispatch import Signal, receiver
from apps.goals.services import get_goal_progress_service

# Wysyłane przez serwis wpisów czytelniczych.
# book_completed:   user_id, reading_entry_id, book_id, from_state (opcjonalnie)
# book_uncompleted: user_id, reading_entry_id (także przy usunięciu wpisu)
book_completed = Signal()
book_uncompleted = Signal()


@receiver(book_completed)
def apply_book_completion(sender, user_id, reading_entry_id, book_id, from_state=None, **kwargs):
    """Zalicz książkę do aktywnych celów. Zwraca zaktualizowane cele (trafiają do odpowiedzi send())."""
    service = get_goal_progress_service()
    return service.on_book_completed(user_id, reading_entry_id, book_id, from_state)


@receiver(book_uncompleted)
def revert_book_completion(sender, user_id, reading_entry_id, **kwargs):
    service = get_goal_progress_service()
    return service.on_book_uncompleted(user_id, reading_entry_id)
