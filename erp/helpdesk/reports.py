from django.db.models import Avg, Count, Q
from erp.core.cache_utils import cached_query, HELPDESK_REPORT_CACHE_TTL
from erp.core.models import User
from .models import Ticket, TicketFeedback

OPEN_STATUSES = ['open', 'pending', 'in-progress']


@cached_query(cache_ttl=HELPDESK_REPORT_CACHE_TTL, key_prefix='helpdesk_report')
def helpdesk_report(company_id=None):
    """Ticket counts by status, priority and agent plus the average rating"""
    tickets = Ticket.objects.all()
    feedback = TicketFeedback.objects.all()
    if company_id:
        tickets = tickets.filter(company_id=company_id)
        feedback = feedback.filter(ticket__company_id=company_id)

    by_status = {row['status']: row['count'] for row in tickets.values('status').annotate(count=Count('id'))}
    by_priority = {row['priority']: row['count'] for row in tickets.values('priority').annotate(count=Count('id'))}
    by_agent = [
        {
            'agent': row['agent_id'],
            'agent_name': row['agent__username'],
            'total': row['total'],
            'open': row['open'],
        }
        for row in tickets.filter(agent__isnull=False).values('agent_id', 'agent__username').annotate(
            total=Count('id'), open=Count('id', filter=Q(status__in=OPEN_STATUSES))
        ).order_by('agent__username')
    ]
    average = feedback.aggregate(avg=Avg('rating'))['avg']
    return {
        'total': tickets.count(),
        'by_status': by_status,
        'by_priority': by_priority,
        'by_agent': by_agent,
        'feedback_count': feedback.count(),
        'average_rating': round(float(average), 2) if average is not None else None,
    }


def agents_with_load(company_id=None):
    agents = User.objects.filter(role__in=['agent', 'admin'], is_active=True)
    if company_id:
        agents = agents.filter(company_id=company_id)
    return agents.annotate(
        open_tickets=Count('assigned_tickets', filter=Q(assigned_tickets__status__in=OPEN_STATUSES))
    ).order_by('username')
