"""Sales order stock commitments and quotation mail"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.db import transaction
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from erp.core.exceptions import BusinessRuleError
from erp.inventory.services import get_locked_inventory

logger = logging.getLogger(__name__)


@transaction.atomic
def commit_order_stock(order, sign=1):
    """Reserve (sign=1) or release (sign=-1) each line's quantity in its warehouse"""
    for line in order.items.select_related('item', 'warehouse'):
        if line.warehouse is None:
            continue
        inventory = get_locked_inventory(line.item, line.warehouse, create=True)
        inventory.committed = max(inventory.committed + sign * line.quantity, 0)
        inventory.save(update_fields=['committed', 'updated_at'])


@transaction.atomic
def cancel_order(order):
    if order.status == 'Cancelled':
        raise BusinessRuleError('Sales order is already cancelled')
    commit_order_stock(order, sign=-1)
    order.status = 'Cancelled'
    order.save(update_fields=['status', 'updated_at'])
    return order


def send_quotation_email(quotation, recipients, sender=None):
    """Mail the quotation as an HTML table of lines plus its financial summary"""
    recipients = [r.strip() for r in recipients or [] if r and r.strip()]
    if not recipients:
        raise BusinessRuleError('At least one recipient email is required')

    context = {
        'quotation': quotation,
        'items': quotation.items.select_related('item'),
        'sender_name': sender.get_full_name() or sender.username if sender else '',
    }
    html_body = render_to_string('sales/quotation_email.html', context)
    message = EmailMultiAlternatives(
        subject=f"Sales Quotation {quotation.document_number}",
        body=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
    )
    message.attach_alternative(html_body, 'text/html')
    message.send()
    logger.info(f"Quotation {quotation.document_number} mailed to {', '.join(recipients)}")
    return recipients
