import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReadingGoal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('active', 'Aktywny'), ('completed', 'Ukończony'), ('expired', 'Wygasły')], default='active', max_length=20)),
                ('target_count', models.PositiveIntegerField(help_text='Ile książek trzeba przeczytać')),
                ('progress_count', models.PositiveIntegerField(default=0)),
                ('bonus_count', models.PositiveIntegerField(default=0, help_text='Książki ponad cel')),
                ('deadline_at_utc', models.DateTimeField()),
                ('deadline_timezone', models.CharField(default='UTC', max_length=50)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reading_goals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['user', 'status'], name='reading_goal_user_status'),
                    models.Index(fields=['user', 'deadline_at_utc'], name='reading_goal_user_deadline'),
                    models.Index(fields=['status', 'deadline_at_utc'], name='reading_goal_status_deadline'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(target_count__gt=0), name='reading_goal_target_positive'),
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
                ],
            },
        ),
        migrations.CreateModel(
            name='GoalProgressEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reading_entry_id', models.UUIDField(db_index=True)),
                ('book_id', models.UUIDField()),
                ('applied_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('applied_from_state', models.CharField(blank=True, max_length=20, null=True)),
                ('goal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='progress_entries', to='goals.readinggoal')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('goal', 'reading_entry_id'), name='uniq_goal_reading_entry'),
                ],
            },
        ),
    ]
