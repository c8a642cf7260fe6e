"""
Management command to set up Django-Q2 schedules for notification jobs.

This command creates/updates the scheduled tasks required for:
- Daily potential spam digest (6:00 AM UTC)

Usage:
    python manage.py setup_schedules

The command is idempotent - safe to run multiple times.
Existing schedules will be updated if their configuration changes.
"""
from django.core.management.base import BaseCommand
from django_q.models import Schedule

SCHEDULES = [
    {
        'name': 'Spam Report Check',
        'description': 'daily at 6:00 AM',
        'defaults': {
            'func': 'apps.notifications.tasks.check_spam_reports',
            'schedule_type': Schedule.CRON,
            'cron': '0 6 * * *',
            'repeats': -1,  # Run forever
        },
    },
]


class Command(BaseCommand):
    help = 'Set up Django-Q2 schedules for notification jobs'

    def handle(self, *args, **options):
        self.stdout.write('\nSetting up Django-Q2 schedules...\n')

        schedules_created = 0
        schedules_updated = 0

        for entry in SCHEDULES:
            _schedule, created = Schedule.objects.update_or_create(
                name=entry['name'],
                defaults=entry['defaults'],
            )
            label = f"{entry['name']} ({entry['description']})"
            if created:
                schedules_created += 1
                self.stdout.write(self.style.SUCCESS(f'✓ Created schedule: {label}'))
            else:
                schedules_updated += 1
                self.stdout.write(self.style.WARNING(f'↻ Updated schedule: {label}'))

        total = schedules_created + schedules_updated
        self.stdout.write('')

        if schedules_created > 0 and schedules_updated > 0:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Done! {schedules_created} schedule(s) created, '
                    f'{schedules_updated} schedule(s) updated. '
                    f'Total: {total} schedules configured.'
                )
            )
        elif schedules_created > 0:
            self.stdout.write(
                self.style.SUCCESS(f'Done! {schedules_created} schedules configured.')
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Done! All {total} schedules already exist and were updated.'
                )
            )

        self.stdout.write('')
        self.stdout.write(
            self.style.NOTICE(
                'Note: Ensure Django-Q cluster is running: python manage.py qcluster'
            )
        )
        self.stdout.write('')
