"""Purchasing workflows: on-order bookkeeping, GRN posting, attachments"""
import logging

from django.db import transaction

from erp.core.exceptions import BusinessRuleError, UnprocessableError
from erp.core.utils import next_document_number
from erp.inventory.services import get_locked_inventory, receive_stock
from .models import GRNItem, GRNItemBatch, GRNQualityCheck, PurchaseAttachment, PurchaseOrderItem

logger = logging.getLogger(__name__)


def require_supplier_and_items(data, items_data):
    """Purchase quotations need a supplier and at least one line"""
    if not data.get('supplier'):
        raise UnprocessableError('Supplier is required')
    if not items_data:
        raise UnprocessableError('At least one item is required')


def attach_files(document, parent_field, files, user=None):
    attachments = []
    for upload in files:
        attachments.append(PurchaseAttachment.objects.create(
            **{parent_field: document},
            file=upload,
            file_name=upload.name,
            content_type=getattr(upload, 'content_type', '') or '',
            uploaded_by=user,
        ))
    return attachments


@transaction.atomic
def book_on_order(order, sign=1):
    """Add (sign=1) or remove (sign=-1) each open line's quantity from on_order"""
    for line in order.items.select_related('item', 'warehouse'):
        if line.warehouse is None:
            continue
        quantity = line.quantity if sign > 0 else line.pending_quantity
        inventory = get_locked_inventory(line.item, line.warehouse, create=True)
        inventory.on_order = max(inventory.on_order + sign * quantity, 0)
        inventory.save(update_fields=['on_order', 'updated_at'])


def _match_order_line(purchase_order, line):
    order_line = line.get('purchase_order_item')
    if order_line is not None:
        if order_line.order_id != purchase_order.id:
            raise BusinessRuleError('Purchase order line does not belong to the linked purchase order')
        return PurchaseOrderItem.objects.select_for_update().get(pk=order_line.pk)
    candidates = PurchaseOrderItem.objects.select_for_update().filter(order=purchase_order, item=line['item'])
    for candidate in candidates:
        if candidate.pending_quantity > 0:
            return candidate
    return candidates.first()


@transaction.atomic
def create_grn(serializer, lines, user=None):
    """
    Save a GRN from a validated header serializer and validated lines.

    Every line is received into stock (batches included) under the GRN
    number. When the GRN is linked to a purchase order the matching order
    lines accrue received_quantity and the order status is refreshed. Any
    failure rolls the whole receipt back.
    """
    grn = serializer.save(created_by=user, document_number=next_document_number('GRN'))
    purchase_order = grn.purchase_order

    for line in lines:
        line = dict(line)
        batches = line.pop('batches', None) or []
        quality_checks = line.pop('quality_checks', None) or []
        order_line = _match_order_line(purchase_order, line) if purchase_order else None
        if order_line is not None:
            line['purchase_order_item'] = order_line

        grn_item = GRNItem.objects.create(grn=grn, **line)
        for batch in batches:
            GRNItemBatch.objects.create(grn_item=grn_item, **batch)
        for check in quality_checks:
            GRNQualityCheck.objects.create(grn_item=grn_item, **check)

        receive_stock(
            grn_item.item, grn_item.warehouse, grn_item.quantity,
            batches=[dict(batch, unit_price=grn_item.unit_price) for batch in batches],
            reference=grn.document_number,
            reference_type='GRN',
            user=user,
            bin_location=grn_item.bin_location,
            reduce_on_order=order_line is not None,
        )

        if order_line is not None:
            order_line.received_quantity += grn_item.quantity
            order_line.save(update_fields=['received_quantity'])

    grn.recalculate()
    if purchase_order is not None:
        purchase_order.refresh_status()
    logger.info(f"GRN {grn.document_number} received {len(lines)} line(s)")
    return grn
