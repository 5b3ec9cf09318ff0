"""
Email threading helpers.

Message ids are stored normalized (no angle brackets, no whitespace) so an
inbound reply can be matched against a ticket's thread id or any message id
it has seen, whichever header the client chose to fill in.
"""
import re

from django.db.models import Q
from django.utils.html import strip_tags

EMAIL_RE = re.compile(r'[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}')
BLOCK_RE = re.compile(r'<(style|script)\b[^>]*>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
QUOTED_HEADER_RE = re.compile(r'\b(From|Sent|To|Subject):\s', re.IGNORECASE)


def normalize_message_id(value):
    if not value:
        return ''
    value = str(value).strip()
    if value.startswith('<') and value.endswith('>'):
        value = value[1:-1]
    return re.sub(r'\s+', '', value)


def extract_email(value):
    """First email address in a header value, list or provider dict, lowercased"""
    if not value:
        return ''
    if isinstance(value, (list, tuple)):
        return extract_email(value[0]) if value else ''
    if isinstance(value, dict):
        for key in ('email', 'address', 'mail', 'Email'):
            if value.get(key):
                return extract_email(value[key])
        return ''
    match = EMAIL_RE.search(str(value))
    return match.group(0).lower() if match else ''


def parse_references(value):
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        parts = []
        for entry in value:
            parts.extend(str(entry).split())
    else:
        parts = str(value).split()
    return [ref for ref in (normalize_message_id(part) for part in parts) if ref]


def clean_reply_body(text):
    """Plain text of a reply without markup or the quoted earlier conversation"""
    if not text:
        return ''
    text = BLOCK_RE.sub('', str(text))
    text = re.sub(r'<br\s*/?>', '\n', text, flags=re.IGNORECASE)
    text = strip_tags(text).replace('&nbsp;', ' ')
    marker = QUOTED_HEADER_RE.search(text)
    if marker:
        text = text[:marker.start()]
    return text.strip()


def reply_subject(subject):
    subject = (subject or '').strip()
    return subject if subject.lower().startswith('re:') else f"Re: {subject}"


def find_ticket_for_email(message_id='', in_reply_to='', references=None):
    """
    Ticket an inbound message belongs to, or None.

    Candidates are the message's own id, In-Reply-To and References. A
    ticket matches when its thread id or any of its stored message ids is a
    candidate; the most recently updated match wins.
    """
    from .models import Ticket

    candidates = {normalize_message_id(message_id), normalize_message_id(in_reply_to)}
    candidates.update(parse_references(references))
    candidates.discard('')
    if not candidates:
        return None
    return (
        Ticket.objects.filter(Q(email_thread_id__in=candidates) | Q(messages__message_id__in=candidates))
        .distinct()
        .order_by('-updated_at', '-id')
        .first()
    )


def thread_references(ticket):
    """References chain for an outgoing reply: thread id then message ids, oldest first"""
    chain = []
    for value in [ticket.email_thread_id] + list(
            ticket.messages.exclude(message_id='').values_list('message_id', flat=True)):
        value = normalize_message_id(value)
        if value and value not in chain:
            chain.append(value)
    return chain
