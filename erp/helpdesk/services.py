"""
Ticket workflows: agent rotation, inbound mail, replies, assignment,
status changes, feedback and SLA checks.
"""
import logging
import time
import uuid
from datetime import timedelta

from django.conf import settings
from django.core import signing
from django.core.files.base import ContentFile
from django.core.mail import EmailMultiAlternatives, make_msgid, send_mail
from django.db import transaction
from django.db.models import Q
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from erp.core.exceptions import BusinessRuleError, ConflictError, ForbiddenError, NotFoundError
from erp.core.models import Notification, SupportMailbox, User
from erp.core.utils import create_audit_log, is_agent_available
from erp.parties.models import Customer, find_customer_by_email
from .models import Ticket, TicketMessage, TicketAttachment, TicketCategory, SLAPolicy, TicketFeedback
from .threading import (
    clean_reply_body, find_ticket_for_email, normalize_message_id, parse_references,
    reply_subject, thread_references,
)

logger = logging.getLogger(__name__)

SLA_HOURS = {
    'low': 48,
    'normal': 24,
    'high': 8,
    'urgent': 1,
}
FEEDBACK_SALT = 'erp.helpdesk.feedback'
AGENT_ROLES = ('agent', 'admin')
STATUSES = [choice[0] for choice in Ticket.STATUS_CHOICES]
PRIORITIES = [choice[0] for choice in Ticket.PRIORITY_CHOICES]


def notify(user, notification_type, message, ticket_id):
    if user is None:
        return None
    return Notification.objects.create(user=user, notification_type=notification_type,
                                       message=message, reference=f'ticket:{ticket_id}')


def new_message_id():
    return normalize_message_id(make_msgid(domain=settings.MESSAGE_ID_DOMAIN))


def tickets_visible_to(user):
    """Admins see every ticket of their company, agents their assigned tickets, others their own"""
    tickets = Ticket.objects.all()
    if user.is_superuser:
        return tickets
    if user.is_admin_role:
        return tickets.filter(company=user.company) if user.company_id else tickets
    if user.role == 'agent':
        return tickets.filter(agent=user)
    own = Q(customer__user=user)
    if user.email:
        own |= Q(customer_email__iexact=user.email)
    return tickets.filter(own)


# Agent rotation
def get_next_available_agent(customer, on_date=None):
    """
    Next agent for a customer, rotating through its available assigned
    agents (ordered by id). The rotation index is stored on the customer.
    """
    if customer is None:
        return None
    agents = [agent for agent in customer.assigned_agents.order_by('id') if is_agent_available(agent, on_date)]
    if not agents:
        return None
    index = (customer.last_assigned_agent_index + 1) % len(agents)
    customer.last_assigned_agent_index = index
    customer.save(update_fields=['last_assigned_agent_index', 'updated_at'])
    return agents[index]


def auto_reassign_tickets(on_date=None):
    """
    Move open/pending tickets away from agents who are unavailable on the
    date. Failures on one ticket are logged and the run continues.
    """
    on_date = on_date or timezone.localdate()
    result = {'evaluated': 0, 'reassigned': 0, 'skipped': 0, 'errors': 0}
    tickets = Ticket.objects.filter(
        status__in=['open', 'pending'], agent__isnull=False, customer__isnull=False
    ).select_related('agent', 'customer')

    for ticket in tickets:
        result['evaluated'] += 1
        if is_agent_available(ticket.agent, on_date):
            continue
        try:
            with transaction.atomic():
                previous = ticket.agent
                agent = get_next_available_agent(ticket.customer, on_date)
                if agent is None or agent.id == previous.id:
                    result['skipped'] += 1
                    continue
                ticket.agent = agent
                ticket.assigned_at = timezone.now()
                ticket.assignment_source = 'auto-reassign'
                ticket.save(update_fields=['agent', 'assigned_at', 'assignment_source', 'updated_at'])
                notify(agent, 'ticket-assigned', f'Ticket #{ticket.id} "{ticket.subject}" has been reassigned to you',
                       ticket.id)
            result['reassigned'] += 1
            logger.info(f"Ticket {ticket.id} reassigned from {previous.username} to {agent.username}")
        except Exception as e:
            result['errors'] += 1
            logger.error(f"Auto-reassign failed for ticket {ticket.id}: {str(e)}", exc_info=True)
    return result


# Messages and attachments
def store_attachments(message, files):
    """Save uploads or (filename, bytes, content type) tuples against a message"""
    saved = []
    for entry in files or []:
        if isinstance(entry, tuple):
            filename, content, content_type = entry
            upload = ContentFile(content, name=filename)
            size = len(content)
        else:
            upload = entry
            filename = entry.name
            content_type = getattr(entry, 'content_type', '') or ''
            size = entry.size or 0
        saved.append(TicketAttachment.objects.create(
            message=message, file=upload, filename=filename,
            content_type=content_type or 'application/octet-stream', size=size,
        ))
    return saved


@transaction.atomic
def append_customer_message(ticket, body, message_id='', in_reply_to='', references=None,
                            from_email='', to_email='', sender=None, attachments=None):
    """Add a customer message; a closed ticket is reopened. Returns (message, reopened)"""
    ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
    now = timezone.now()
    reopened = ticket.status == 'closed'
    if reopened:
        ticket.status = 'open'
        ticket.auto_closed = False
        ticket.closed_at = None

    message = TicketMessage.objects.create(
        ticket=ticket,
        sender_type='customer',
        sender=sender,
        external_email=from_email or '',
        message=body,
        message_id=normalize_message_id(message_id),
        in_reply_to=normalize_message_id(in_reply_to),
        references=' '.join(parse_references(references)),
        from_email=from_email or '',
        to_email=to_email or '',
    )
    store_attachments(message, attachments)
    ticket.last_reply_at = now
    ticket.last_customer_reply_at = now
    ticket.save()

    if reopened:
        create_audit_log(action='ticket_reopen', model_name='Ticket', object_id=str(ticket.id), user=sender,
                         object_name=ticket.subject, changes={'message_id': message.message_id})
        logger.info(f"Ticket {ticket.id} reopened by customer reply")
    return message, reopened


# Inbound email
def _inbound_body(parsed):
    return clean_reply_body(parsed.get('text')) or clean_reply_body(parsed.get('html')) or '(no content)'


@transaction.atomic
def process_inbound_email(parsed):
    """
    Thread an inbound message onto its ticket or open a new ticket.

    Replies are matched by Message-ID / In-Reply-To / References; a message
    id already stored on the ticket is acknowledged without changes. New
    threads need an active support mailbox as recipient and a known
    customer of that mailbox's company as sender.
    """
    from_email = parsed.get('from_email')
    to_email = parsed.get('to_email')
    if not from_email or not to_email:
        raise BusinessRuleError('Invalid email')

    message_id = normalize_message_id(parsed.get('message_id'))
    body = _inbound_body(parsed)

    ticket = find_ticket_for_email(message_id, parsed.get('in_reply_to'), parsed.get('references'))
    if ticket is not None:
        if message_id and ticket.messages.filter(message_id=message_id).exists():
            logger.info(f"Duplicate inbound message {message_id} for ticket {ticket.id}")
            return {'success': True, 'ticketId': ticket.id, 'duplicate': True}
        _, reopened = append_customer_message(
            ticket, body,
            message_id=message_id,
            in_reply_to=parsed.get('in_reply_to'),
            references=parsed.get('references'),
            from_email=from_email,
            to_email=to_email,
            attachments=parsed.get('attachments'),
        )
        return {'success': True, 'ticketId': ticket.id, 'reopened': reopened}

    mailbox = SupportMailbox.objects.filter(email__iexact=to_email, is_active=True).select_related('company').first()
    if mailbox is None:
        raise ForbiddenError('Invalid mailbox')
    customer = find_customer_by_email(mailbox.company, from_email)
    if customer is None:
        raise ForbiddenError('Unknown customer')

    now = timezone.now()
    agent = get_next_available_agent(customer)
    ticket = Ticket.objects.create(
        company=mailbox.company,
        customer=customer,
        customer_email=from_email,
        agent=agent,
        assigned_at=now if agent else None,
        assignment_source='auto' if agent else '',
        sla_due=now + timedelta(hours=SLA_HOURS['normal']) if agent else None,
        source='email',
        subject=parsed.get('subject') or 'No Subject',
        email_thread_id=message_id or f"mail-{int(time.time() * 1000)}",
        email_alias=mailbox.email,
        last_reply_at=now,
        last_customer_reply_at=now,
    )
    message = TicketMessage.objects.create(
        ticket=ticket,
        sender_type='customer',
        sender=customer.user,
        external_email=from_email,
        message=body,
        message_id=message_id,
        from_email=from_email,
        to_email=to_email,
    )
    store_attachments(message, parsed.get('attachments'))
    if agent:
        notify(agent, 'ticket-assigned', f'New ticket #{ticket.id} "{ticket.subject}" has been assigned to you',
               ticket.id)
    create_audit_log(action='ticket_create', model_name='Ticket', object_id=str(ticket.id), user=customer.user,
                     object_name=ticket.subject, changes={'source': 'email', 'from': from_email})
    logger.info(f"Ticket {ticket.id} opened from email {from_email} via {mailbox.email}")
    return {'success': True, 'ticketId': ticket.id, 'created': True}


# Replies
def _send_reply_mail(ticket, message, attachments):
    alias = ticket.email_alias or settings.SUPPORT_EMAIL
    mailbox = SupportMailbox.objects.filter(email__iexact=alias).first()
    from_email = f"{mailbox.display_name} <{alias}>" if mailbox and mailbox.display_name else alias

    headers = {'Message-ID': f"<{message.message_id}>"}
    if message.in_reply_to:
        headers['In-Reply-To'] = f"<{message.in_reply_to}>"
    if message.references:
        headers['References'] = ' '.join(f"<{ref}>" for ref in message.references.split())

    html_body = render_to_string('helpdesk/agent_reply.html', {'ticket': ticket, 'message': message})
    mail = EmailMultiAlternatives(
        subject=reply_subject(ticket.subject),
        body=message.message,
        from_email=from_email,
        to=[ticket.customer_email],
        reply_to=[alias],
        headers=headers,
    )
    mail.attach_alternative(html_body, 'text/html')
    for attachment in attachments:
        attachment.file.open('rb')
        try:
            mail.attach(attachment.filename, attachment.file.read(), attachment.content_type)
        finally:
            attachment.file.close()
    mail.send()


def post_reply(ticket, user, raw_message, uploads=None):
    """
    Add a reply from a user. Agents and admins reply as agent: the message
    gets its own Message-ID and, on email tickets, is mailed to the customer
    threaded onto the last customer message. Anyone else replies as the
    customer. Returns (message, mail_sent, reopened).
    """
    body = clean_reply_body(raw_message)
    if not body:
        raise BusinessRuleError('Message cannot be empty')

    if not (user.is_admin_role or user.role == 'agent'):
        message, reopened = append_customer_message(
            ticket, body, message_id=new_message_id(), from_email=user.email,
            sender=user, attachments=uploads,
        )
        return message, None, reopened

    with transaction.atomic():
        ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
        last_customer = ticket.messages.filter(sender_type='customer').exclude(message_id='') \
            .order_by('-created_at', '-id').first()
        in_reply_to = last_customer.message_id if last_customer else normalize_message_id(ticket.email_thread_id)
        references = thread_references(ticket)
        now = timezone.now()

        message = TicketMessage.objects.create(
            ticket=ticket,
            sender_type='agent',
            sender=user,
            message=body,
            message_id=new_message_id(),
            in_reply_to=in_reply_to,
            references=' '.join(references),
            from_email=ticket.email_alias or settings.SUPPORT_EMAIL,
            to_email=ticket.customer_email,
        )
        attachments = store_attachments(message, uploads)
        ticket.last_agent_reply_at = now
        ticket.last_reply_at = now
        ticket.status = 'in-progress'
        ticket.save(update_fields=['last_agent_reply_at', 'last_reply_at', 'status', 'updated_at'])

    create_audit_log(action='ticket_reply', model_name='Ticket', object_id=str(ticket.id), user=user,
                     object_name=ticket.subject, changes={'message_id': message.message_id})

    mail_sent = None
    if ticket.source == 'email' and ticket.customer_email:
        try:
            _send_reply_mail(ticket, message, attachments)
            mail_sent = True
        except Exception as e:
            mail_sent = False
            logger.error(f"Reply mail for ticket {ticket.id} failed: {str(e)}", exc_info=True)
    return message, mail_sent, False


# Web tickets
@transaction.atomic
def create_web_ticket(user, category, subject, message, priority='normal', uploads=None):
    company = user.company
    if company is None:
        raise BusinessRuleError('User is not linked to a company')
    if not category or not TicketCategory.objects.filter(company=company, name=category).exists():
        raise BusinessRuleError('Invalid category')
    subject = (subject or '').strip()
    body = (message or '').strip()
    if not subject or not body:
        raise BusinessRuleError('Subject and message are required')
    if priority not in PRIORITIES:
        raise BusinessRuleError('Invalid priority')

    customer = Customer.objects.filter(user=user).first()
    agent = get_next_available_agent(customer) if customer else None
    now = timezone.now()
    thread_id = f"web-{uuid.uuid4()}@{settings.MESSAGE_ID_DOMAIN}"
    ticket = Ticket.objects.create(
        company=company,
        customer=customer,
        customer_email=(customer.email if customer and customer.email else user.email) or '',
        agent=agent,
        assigned_at=now if agent else None,
        assignment_source='auto' if agent else '',
        sla_due=now + timedelta(hours=SLA_HOURS[priority]) if agent else None,
        source='web',
        subject=subject,
        category=category,
        priority=priority,
        email_thread_id=thread_id,
        last_reply_at=now,
        last_customer_reply_at=now,
    )
    first = TicketMessage.objects.create(
        ticket=ticket, sender_type='customer', sender=user, external_email=user.email or '',
        message=body, message_id=thread_id, from_email=user.email or '',
    )
    store_attachments(first, uploads)
    if agent:
        notify(agent, 'ticket-assigned', f'New ticket #{ticket.id} "{ticket.subject}" has been assigned to you',
               ticket.id)
    create_audit_log(action='ticket_create', model_name='Ticket', object_id=str(ticket.id), user=user,
                     object_name=ticket.subject, changes={'source': 'web', 'category': category})

    try:
        send_mail(
            subject=f"New ticket #{ticket.id}: {ticket.subject}",
            message=f"{user.get_full_name() or user.username} opened a ticket.\n\n{body}",
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[settings.SUPPORT_EMAIL],
        )
    except Exception as e:
        logger.warning(f"Support notification for ticket {ticket.id} not sent: {str(e)}")
    return ticket


# Assignment and status
@transaction.atomic
def assign_ticket(ticket, agent_id, priority=None, assigned_by=None):
    """Assign an agent and start the SLA clock. Returns (ticket, changed)"""
    agent = User.objects.filter(pk=agent_id, role__in=AGENT_ROLES).first() if agent_id else None
    if agent is None:
        raise NotFoundError('Agent not found')
    ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
    if ticket.agent_id == agent.id:
        return ticket, False
    if ticket.agent_id is not None:
        raise ConflictError('Ticket is already assigned to another agent')
    if priority:
        if priority not in PRIORITIES:
            raise BusinessRuleError('Invalid priority')
        ticket.priority = priority

    now = timezone.now()
    ticket.agent = agent
    ticket.assigned_at = now
    ticket.assignment_source = 'manual'
    ticket.sla_due = now + timedelta(hours=SLA_HOURS[ticket.priority])
    ticket.save()
    notify(agent, 'ticket-assigned', f'Ticket #{ticket.id} "{ticket.subject}" has been assigned to you', ticket.id)
    create_audit_log(action='ticket_assign', model_name='Ticket', object_id=str(ticket.id), user=assigned_by,
                     object_name=ticket.subject, changes={'agent': agent.username, 'priority': ticket.priority})
    return ticket, True


def update_ticket_status(ticket, new_status, user=None):
    if new_status not in STATUSES:
        raise BusinessRuleError('Invalid status')
    previous = ticket.status
    ticket.status = new_status
    if new_status == 'closed':
        ticket.closed_at = timezone.now()
    else:
        ticket.closed_at = None
        ticket.auto_closed = False
    ticket.save(update_fields=['status', 'closed_at', 'auto_closed', 'updated_at'])
    create_audit_log(action='ticket_status', model_name='Ticket', object_id=str(ticket.id), user=user,
                     object_name=ticket.subject, changes={'from': previous, 'to': new_status})
    return ticket


# Feedback
def make_feedback_token(ticket):
    return signing.dumps({'ticket': ticket.id}, salt=FEEDBACK_SALT)


def read_feedback_token(token):
    try:
        payload = signing.loads(token or '', salt=FEEDBACK_SALT, max_age=settings.FEEDBACK_TOKEN_MAX_AGE)
    except signing.BadSignature:
        raise BusinessRuleError('Invalid or expired feedback link')
    return payload.get('ticket')


def send_feedback_email(ticket):
    recipient = ticket.customer_email or (ticket.customer.email if ticket.customer else '')
    if not recipient:
        raise BusinessRuleError('Ticket has no customer email')
    link = f"{settings.APP_URL.rstrip('/')}/feedback?token={make_feedback_token(ticket)}"
    html_body = render_to_string('helpdesk/feedback_email.html', {'ticket': ticket, 'feedback_link': link})
    mail = EmailMultiAlternatives(
        subject=f"How did we do? Ticket #{ticket.id}: {ticket.subject}",
        body=strip_tags(html_body),
        from_email=ticket.email_alias or settings.SUPPORT_EMAIL,
        to=[recipient],
    )
    mail.attach_alternative(html_body, 'text/html')
    mail.send()
    logger.info(f"Feedback request for ticket {ticket.id} sent to {recipient}")
    return link


@transaction.atomic
def submit_feedback(token, rating, comment=''):
    ticket_id = read_feedback_token(token)
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise BusinessRuleError('Rating must be between 1 and 5')
    if not 1 <= rating <= 5:
        raise BusinessRuleError('Rating must be between 1 and 5')

    ticket = Ticket.objects.select_for_update().filter(pk=ticket_id).first()
    if ticket is None:
        raise NotFoundError('Ticket not found')
    if TicketFeedback.objects.filter(ticket=ticket).exists():
        raise ConflictError('Feedback already submitted')

    feedback = TicketFeedback.objects.create(
        ticket=ticket, customer_email=ticket.customer_email, rating=rating, comment=comment or '',
    )
    ticket.feedback_rating = rating
    ticket.save(update_fields=['feedback_rating', 'updated_at'])
    notify(ticket.agent, 'ticket-feedback', f'Ticket #{ticket.id} received a {rating}-star rating', ticket.id)
    return feedback


# SLA
def get_sla_policy(ticket):
    policy = SLAPolicy.objects.filter(company=ticket.company, priority=ticket.priority).first()
    return policy or SLAPolicy.objects.filter(company=ticket.company, priority__isnull=True).first()


def _hours(delta):
    return delta.total_seconds() / 3600


def check_sla(ticket, now=None):
    """Response and resolution breach flags for a ticket, or None without a policy"""
    policy = get_sla_policy(ticket)
    if policy is None:
        return None
    now = now or timezone.now()
    response_hours = float(policy.response_hours)
    resolution_hours = float(policy.resolution_hours)

    elapsed = _hours(now - ticket.created_at)
    first_agent = ticket.messages.filter(sender_type='agent').order_by('created_at', 'id').first()
    first_response = _hours(first_agent.created_at - ticket.created_at) if first_agent else None
    if first_response is not None:
        response_breach = first_response > response_hours
    else:
        response_breach = elapsed > response_hours
    resolution_breach = bool(
        ticket.status == 'closed' and ticket.closed_at
        and _hours(ticket.closed_at - ticket.created_at) > resolution_hours
    )
    return {
        'ticketId': ticket.id,
        'priority': ticket.priority,
        'response_hours': response_hours,
        'resolution_hours': resolution_hours,
        'elapsed_hours': round(elapsed, 2),
        'first_response_hours': round(first_response, 2) if first_response is not None else None,
        'response_breach': response_breach,
        'resolution_breach': resolution_breach,
    }
