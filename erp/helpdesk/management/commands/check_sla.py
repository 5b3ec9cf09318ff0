"""
Report open tickets that breached their response or resolution SLA
"""
from django.core.management.base import BaseCommand
from erp.helpdesk.models import Ticket
from erp.helpdesk.services import check_sla


class Command(BaseCommand):
    help = 'List open tickets that breached their SLA'

    def add_arguments(self, parser):
        parser.add_argument('--company-id', type=int, help='Check one company only')

    def handle(self, *args, **options):
        tickets = Ticket.objects.exclude(status='closed').select_related('agent')
        if options.get('company_id'):
            tickets = tickets.filter(company_id=options['company_id'])

        checked = breached = 0
        for ticket in tickets:
            result = check_sla(ticket)
            if result is None:
                continue
            checked += 1
            if result['response_breach'] or result['resolution_breach']:
                breached += 1
                agent = ticket.agent.username if ticket.agent else 'unassigned'
                self.stdout.write(self.style.WARNING(
                    f"#{ticket.id} {ticket.subject[:60]} ({agent}) "
                    f"response breached: {result['response_breach']}, "
                    f"resolution breached: {result['resolution_breach']}"
                ))

        self.stdout.write(self.style.SUCCESS(f'Checked {checked} tickets, {breached} breached'))
