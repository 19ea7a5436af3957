from django.apps import AppConfig


class GoalsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.goals'  # Ważne: pełna ścieżka z 'apps.'
    label = 'goals'      # Ważne: krótka nazwa, żeby Django widziało to jako 'goals'

    def ready(self):
        import apps.goals.signals  # noqa: F401
