# apps/goals/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone
from apps.goals.domain.entities import GoalStatus
from apps.goals.domain.services.deadlines import normalize_deadline


class ReadingGoalQuerySet(models.QuerySet):
    def for_user(self, user_id):
        return self.filter(user_id=user_id)

    def active(self):
        return self.filter(status=GoalStatus.ACTIVE.value)

    def overdue(self, now):
        """Aktywne cele, których termin już minął."""
        return self.active().filter(deadline_at_utc__lt=now)

    def in_processing_order(self):
        # Deterministyczna kolejność przetwarzania zdarzeń
        return self.order_by('created_at', 'id')

    def in_display_order(self):
        # Najpierw aktywne, potem ukończone, na końcu wygasłe; w grupie wg terminu
        status_rank = models.Case(
            models.When(status=GoalStatus.ACTIVE.value, then=models.Value(1)),
            models.When(status=GoalStatus.COMPLETED.value, then=models.Value(2)),
            default=models.Value(3),
            output_field=models.IntegerField(),
        )
        return self.annotate(status_rank=status_rank).order_by('status_rank', 'deadline_at_utc')


class ReadingGoal(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reading_goals')
    name = models.CharField(max_length=255)

    # Używamy TextChoices dla wygody w Adminie, ale mapujemy to na Enum domenowy
    class StatusChoices(models.TextChoices):
        ACTIVE = 'active', 'Aktywny'
        COMPLETED = 'completed', 'Ukończony'
        EXPIRED = 'expired', 'Wygasły'

    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE
    )

    target_count = models.PositiveIntegerField(help_text="Ile książek trzeba przeczytać")

    # Liczniki pochodne - przeliczane z rejestru postępu, nigdy nie inkrementowane
    progress_count = models.PositiveIntegerField(default=0)
    bonus_count = models.PositiveIntegerField(default=0, help_text="Książki ponad cel")

    # Termin zawsze w UTC; strefa czytelnika służy tylko do wyświetlania
    deadline_at_utc = models.DateTimeField()
    deadline_timezone = models.CharField(max_length=50, default='UTC')

    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReadingGoalQuerySet.as_manager()

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(target_count__gt=0),
                name='reading_goal_target_positive',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(progress_count__lte=models.F('target_count'), bonus_count=0)
                    | models.Q(
                        progress_count__gt=models.F('target_count'),
                        bonus_count=models.F('progress_count') - models.F('target_count'),
                    )
                ),
                name='reading_goal_bonus_calculation',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status='completed', completed_at__isnull=False)
                    | (~models.Q(status='completed') & models.Q(completed_at__isnull=True))
                ),
                name='reading_goal_completed_status',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'status'], name='reading_goal_user_status'),
            models.Index(fields=['user', 'deadline_at_utc'], name='reading_goal_user_deadline'),
            models.Index(fields=['status', 'deadline_at_utc'], name='reading_goal_status_deadline'),
        ]

    def __str__(self):
        return f"{self.name} ({self.progress_count}/{self.target_count})"

    def save(self, *args, **kwargs):
        # Termin zawsze zapisujemy w UTC
        if self.deadline_at_utc:
            self.deadline_at_utc = normalize_deadline(self.deadline_at_utc, self.deadline_timezone)
        super().save(*args, **kwargs)


class GoalProgressEntry(models.Model):
    """Fakt: wpis czytelniczy został zaliczony do celu (rejestr postępu)."""
    goal = models.ForeignKey(ReadingGoal, on_delete=models.CASCADE, related_name='progress_entries')

    # Identyfikatory z zewnętrznych serwisów (wpisy czytelnicze, katalog)
    reading_entry_id = models.UUIDField(db_index=True)
    book_id = models.UUIDField()

    applied_at = models.DateTimeField(default=timezone.now)
    applied_from_state = models.CharField(max_length=20, null=True, blank=True)

    class Meta:
        constraints = [
            # Klucz idempotencji: ta sama książka nie liczy się dwa razy do celu
            models.UniqueConstraint(fields=['goal', 'reading_entry_id'], name='uniq_goal_reading_entry'),
        ]

    def __str__(self):
        return f"Goal {self.goal_id} <- {self.reading_entry_id}"
