"""
Inbound email normalization.

Webhooks arrive as plain JSON, as form posts from Postmark / SendGrid /
Mailgun, or as a raw RFC 822 message. Everything is reduced to one dict:

    from_email, to_email, subject, text, html,
    message_id, in_reply_to, references, attachments

where attachments is a list of (filename, content bytes, content type).
"""
import base64
import binascii
import email
import json
import logging
from email import policy
from email.parser import HeaderParser

from .threading import extract_email

logger = logging.getLogger(__name__)

RAW_CONTENT_TYPES = ('message/rfc822', 'text/plain')


def _first(data, *keys, default=''):
    for key in keys:
        value = data.get(key)
        if value not in (None, '', [], {}):
            return value
    return default


def _provider_headers(data):
    """Header map from Postmark's Headers list or SendGrid's raw header block"""
    headers = {}
    raw = data.get('Headers') or data.get('headers')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            parsed = HeaderParser(policy=policy.default).parsestr(raw)
            return {name.lower(): str(value) for name, value in parsed.items()}
    if isinstance(raw, list):
        for header in raw:
            if isinstance(header, dict) and header.get('Name'):
                headers[header['Name'].lower()] = header.get('Value', '')
    elif isinstance(raw, dict):
        headers = {str(name).lower(): value for name, value in raw.items()}
    return headers


def _decode_base64(content):
    try:
        return base64.b64decode(content)
    except (binascii.Error, ValueError, TypeError):
        logger.warning("Skipping attachment with invalid base64 content")
        return None


def _provider_attachments(data, files):
    attachments = []

    # Postmark: JSON list with base64 content
    postmark = data.get('Attachments')
    if isinstance(postmark, str):
        try:
            postmark = json.loads(postmark)
        except ValueError:
            postmark = None
    for entry in postmark or []:
        content = _decode_base64(entry.get('Content', ''))
        if content is not None:
            attachments.append((entry.get('Name') or 'attachment', content,
                                entry.get('ContentType') or 'application/octet-stream'))

    # SendGrid: attachment-info describes uploaded fields attachment1..n
    info = data.get('attachment-info')
    if info:
        try:
            info = json.loads(info) if isinstance(info, str) else info
        except ValueError:
            info = {}
        for field, meta in (info or {}).items():
            upload = files.get(field)
            if upload is not None:
                attachments.append((meta.get('filename') or upload.name, upload.read(),
                                    meta.get('type') or upload.content_type))

    # Mailgun: attachment-count uploaded fields attachment-1..n
    count = data.get('attachment-count')
    if count:
        try:
            count = int(count)
        except (TypeError, ValueError):
            count = 0
        for index in range(1, count + 1):
            upload = files.get(f'attachment-{index}')
            if upload is not None:
                attachments.append((upload.name, upload.read(), upload.content_type))

    # Anything else uploaded as attachments[]
    if not attachments and hasattr(files, 'getlist'):
        for upload in files.getlist('attachments'):
            attachments.append((upload.name, upload.read(), upload.content_type))
    return attachments


def parse_mime(raw):
    """Normalize a raw RFC 822 message (bytes or str)"""
    if isinstance(raw, str):
        raw = raw.encode('utf-8', errors='replace')
    message = email.message_from_bytes(raw, policy=policy.default)

    text = html = ''
    plain_part = message.get_body(preferencelist=('plain',))
    if plain_part is not None:
        text = plain_part.get_content()
    html_part = message.get_body(preferencelist=('html',))
    if html_part is not None:
        html = html_part.get_content()

    attachments = []
    for part in message.iter_attachments():
        content = part.get_payload(decode=True)
        if content is None:
            continue
        attachments.append((part.get_filename() or 'attachment', content, part.get_content_type()))

    return {
        'from_email': extract_email(str(message.get('From', ''))),
        'to_email': extract_email(str(message.get('Delivered-To') or message.get('To', ''))),
        'subject': str(message.get('Subject', '') or '').strip() or 'No Subject',
        'text': text,
        'html': html,
        'message_id': str(message.get('Message-ID', '') or ''),
        'in_reply_to': str(message.get('In-Reply-To', '') or ''),
        'references': str(message.get('References', '') or ''),
        'attachments': attachments,
    }


def parse_inbound(data, files=None):
    """Normalize a JSON or form webhook body"""
    files = files or {}
    raw = data.get('raw') or data.get('mime')
    if raw:
        return parse_mime(raw)

    headers = _provider_headers(data)
    return {
        'from_email': extract_email(_first(data, 'from', 'sender', 'From', 'FromFull')),
        'to_email': extract_email(_first(data, 'to', 'recipient', 'To', 'ToFull', 'OriginalRecipient')),
        'subject': str(_first(data, 'subject', 'Subject')).strip() or 'No Subject',
        'text': _first(data, 'text', 'TextBody', 'body-plain', 'plain'),
        'html': _first(data, 'html', 'HtmlBody', 'body-html'),
        'message_id': _first(data, 'messageId', 'message_id', 'Message-ID', 'Message-Id') or headers.get('message-id', ''),
        'in_reply_to': _first(data, 'inReplyTo', 'in_reply_to', 'In-Reply-To') or headers.get('in-reply-to', ''),
        'references': _first(data, 'references', 'References') or headers.get('references', ''),
        'attachments': _provider_attachments(data, files),
    }


def parse_inbound_request(request):
    """Pick the right parser for a webhook request"""
    content_type = (request.content_type or '').split(';')[0].strip().lower()
    if content_type in RAW_CONTENT_TYPES:
        return parse_mime(request.body)
    return parse_inbound(request.data, request.FILES)
