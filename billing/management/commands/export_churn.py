# billing/management/commands/export_churn.py
import csv
from django.core.management.base import BaseCommand
from billing.models import Cancellation
from django.utils import timezone

class Command(BaseCommand):
    help = 'Exports cancellation records to a CSV file for analysis'

    def add_arguments(self, parser):
        parser.add_argument('--output', help='Target CSV path (default: churn_report_<date>.csv)')

    def handle(self, *args, **options):
        filename = options.get('output') or f"churn_report_{timezone.now().strftime('%Y-%m-%d')}.csv"

        # Define the fields to export
        fields = ['created_at', 'email', 'reason', 'downsell_variant', 'accepted_downsell']

        with open(filename, 'w', newline='') as csvfile:
            writer = csv.writer(csvfile)
            # Write Header
            writer.writerow([f.replace('_', ' ').title() for f in fields])

            # Write Data
            cancellations = Cancellation.objects.select_related('user').order_by('-created_at')
            count = 0
            for c in cancellations:
                writer.writerow([
                    c.created_at.strftime('%Y-%m-%d %H:%M'),
                    c.user.email,
                    c.reason,
                    c.downsell_variant,
                    'yes' if c.accepted_downsell else 'no',
                ])
                count += 1

        self.stdout.write(self.style.SUCCESS(f'Exported {count} cancellations to {filename}'))
