from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date
from erp.helpdesk.services import auto_reassign_tickets


class Command(BaseCommand):
    help = 'Reassign open and pending tickets whose agent is on leave or on holiday'

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Evaluate availability on this date (YYYY-MM-DD), default today')

    def handle(self, *args, **options):
        on_date = None
        if options.get('date'):
            on_date = parse_date(options['date'])
            if on_date is None:
                raise CommandError(f"Invalid date: {options['date']}")

        result = auto_reassign_tickets(on_date)
        self.stdout.write(
            f"Evaluated: {result['evaluated']}  Reassigned: {result['reassigned']}  "
            f"Skipped: {result['skipped']}  Errors: {result['errors']}"
        )
        if result['errors']:
            self.stdout.write(self.style.WARNING('Some tickets could not be reassigned, see the log'))
        else:
            self.stdout.write(self.style.SUCCESS('Done'))
