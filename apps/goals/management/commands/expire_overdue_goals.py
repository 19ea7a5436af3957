from django.core.management.base import BaseCommand
from apps.goals.services import get_goal_progress_service


class Command(BaseCommand):
    help = 'Wygasza aktywne cele czytelnicze po terminie (uruchamiać np. co godzinę)'

    def handle(self, *args, **options):
        service = get_goal_progress_service()
        expired = service.expire_overdue_goals()

        self.stdout.write(self.style.SUCCESS(f'Wygaszono {len(expired)} celów po terminie.'))
        for goal_id in expired:
            self.stdout.write(f"- cel #{goal_id}")
