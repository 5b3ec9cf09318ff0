"""Production order workflows: create from BOM, transfer, issue, receipt"""
import logging
from decimal import Decimal

from django.db import transaction

from erp.core.exceptions import BusinessRuleError
from erp.core.pricing import to_decimal
from erp.core.utils import next_document_number
from erp.inventory import services as stock
from erp.inventory.models import Inventory
from .models import ProductionOrder, ProductionOrderItem, IssueProduction, ReceiptProduction

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def _positive_qty(value, label='qty'):
    quantity = to_decimal(value)
    if quantity <= 0:
        raise BusinessRuleError(f'A positive {label} is required')
    return quantity


@transaction.atomic
def create_order_from_bom(bom, quantity, warehouse, user=None, items_data=None, **fields):
    """
    Create a production order, copying the BOM's component lines.

    Each line's unit_qty is the BOM quantity, required_qty is unit_qty times
    the order quantity. items_data (list of dicts) overrides the BOM lines.
    """
    quantity = _positive_qty(quantity, 'quantity')
    order = ProductionOrder.objects.create(
        production_doc_no=next_document_number('PRO'),
        bom=bom,
        product=bom.product,
        product_desc=fields.pop('product_desc', '') or bom.product_desc or bom.product.item_name,
        warehouse=warehouse,
        quantity=quantity,
        created_by=user,
        **fields
    )

    if items_data is None:
        items_data = [
            {'item': line.item, 'unit_qty': line.quantity, 'warehouse': line.warehouse, 'unit_price': line.unit_price}
            for line in bom.items.select_related('item', 'warehouse')
        ]
    for line in items_data:
        unit_qty = to_decimal(line.get('unit_qty'))
        required_qty = unit_qty * quantity
        unit_price = to_decimal(line.get('unit_price'))
        ProductionOrderItem.objects.create(
            order=order,
            item=line['item'],
            unit_qty=unit_qty,
            required_qty=required_qty,
            warehouse=line.get('warehouse'),
            unit_price=unit_price,
            total=(required_qty * unit_price).quantize(TWO_PLACES),
        )
    logger.info(f"Production order {order.production_doc_no} created from BOM {bom.id} for {quantity}")
    return order


def recalculate_order_lines(order):
    """Re-derive required_qty and total of every line from the order quantity"""
    for line in order.items.all():
        line.required_qty = line.unit_qty * order.quantity
        line.total = (line.required_qty * line.unit_price).quantize(TWO_PLACES)
        line.save(update_fields=['required_qty', 'total'])
    logger.info(f"Production order {order.production_doc_no} lines recalculated for {order.quantity}")


def _entries(payload):
    """Transfer / issue rows come as {'data': [...]} or a bare list"""
    if isinstance(payload, list):
        return payload
    data = payload.get('data') if hasattr(payload, 'get') else None
    return data if isinstance(data, list) else []


@transaction.atomic
def transfer_for_order(order, qty, payload, user=None):
    """Move component stock for a production order and mark it Transferred"""
    qty = _positive_qty(qty)
    avg_cost_price = payload.get('avgCostPrice') if hasattr(payload, 'get') else None
    transferred = stock.transfer_stock(
        _entries(payload),
        reference=order.production_doc_no,
        reference_type='TRANSFER',
        user=user,
        avg_cost_price=avg_cost_price,
    )
    order = ProductionOrder.objects.select_for_update().get(pk=order.pk)
    order.status = 'Transferred'
    order.transfer_qty += qty
    order.save(update_fields=['status', 'transfer_qty', 'updated_at'])
    return order, transferred


@transaction.atomic
def issue_for_order(order, qty, payload, user=None):
    """
    Issue component stock to a production order.

    Batch-managed items must name a batch. The order's issued_qty grows by qty
    and its rate becomes the supplied average cost price.
    """
    qty = _positive_qty(qty)
    avg_cost_price = payload.get('avgCostPrice') if hasattr(payload, 'get') else None
    if avg_cost_price in (None, ''):
        raise BusinessRuleError('avgCostPrice is required')
    entries = _entries(payload)
    if not entries:
        raise BusinessRuleError('No items to issue')

    issued = []
    for entry in entries:
        item = stock.resolve_item(stock.pick(entry, 'itemId', 'item', 'item_id'))
        warehouse = stock.resolve_warehouse(stock.pick(entry, 'warehouse', 'sourceWarehouse', 'warehouseId'))
        quantity = _positive_qty(stock.pick(entry, 'quantity', 'qty'), 'quantity')
        batch_number = str(stock.pick(entry, 'batchNumber', 'batch_number', default='')).strip()
        if item.is_batch_managed and not batch_number:
            raise BusinessRuleError(f"Batch number is required for item {item.item_code}")

        stock.issue_stock(
            item, warehouse, quantity,
            batch_number=batch_number or None,
            reference=order.production_doc_no,
            reference_type='PRODUCTION',
            user=user,
            movement_type='STOCK_ISSUE',
        )
        issued.append(IssueProduction.objects.create(
            order=order, item=item, warehouse=warehouse, batch_number=batch_number,
            quantity=quantity, rate=to_decimal(avg_cost_price), created_by=user,
        ))

    order = ProductionOrder.objects.select_for_update().get(pk=order.pk)
    order.issued_qty += qty
    order.rate = to_decimal(avg_cost_price)
    if order.status in ('Open', 'Transferred'):
        order.status = 'In Progress'
    order.save(update_fields=['issued_qty', 'rate', 'status', 'updated_at'])
    return order, issued


@transaction.atomic
def receive_for_order(order, qty, user=None, warehouse=None, batch_number=''):
    """
    Receive finished product into the order warehouse. The order is
    Completed once received_qty reaches the ordered quantity.
    """
    qty = _positive_qty(qty)
    warehouse = warehouse or order.warehouse
    if warehouse is None:
        raise BusinessRuleError('Warehouse is required')

    batches = []
    if order.product.is_batch_managed:
        batch_number = batch_number or order.production_doc_no
        batches = [{'batch_number': batch_number, 'quantity': qty, 'unit_price': order.rate}]

    stock.receive_stock(
        order.product, warehouse, qty,
        batches=batches,
        reference=order.production_doc_no,
        reference_type='PRODUCTION',
        user=user,
        movement_type='RECEIPT',
        reduce_on_order=False,
    )
    receipt = ReceiptProduction.objects.create(
        order=order, item=order.product, warehouse=warehouse,
        batch_number=batch_number or '', quantity=qty, created_by=user,
    )

    order = ProductionOrder.objects.select_for_update().get(pk=order.pk)
    order.received_qty += qty
    if order.received_qty >= order.quantity:
        order.status = 'Completed'
    order.save(update_fields=['received_qty', 'status', 'updated_at'])
    return order, receipt


def prefill_transfer(order, qty=None):
    """
    Suggested transfer rows for an order: for every component line, FEFO
    batch allocations from the line's source warehouse covering the required
    quantity (scaled to qty when given), plus any shortfall.
    """
    rows = []
    for line in order.items.select_related('item', 'warehouse'):
        required = line.unit_qty * to_decimal(qty) if qty else line.required_qty
        source = line.warehouse
        row = {
            'itemId': line.item_id,
            'itemCode': line.item.item_code,
            'itemName': line.item.item_name,
            'sourceWarehouse': source.code if source else None,
            'destinationWarehouse': order.warehouse.code,
            'requiredQty': required,
            'available': Decimal('0'),
            'allocations': [],
            'shortfall': required,
        }
        if source is not None:
            inventory = Inventory.objects.filter(item=line.item, warehouse=source).first()
            row['available'] = inventory.quantity if inventory else Decimal('0')
            if line.item.is_batch_managed:
                allocations, shortfall = stock.allocate_batches(line.item, source, required)
                row['allocations'] = [
                    {
                        'batchNumber': batch.batch_number,
                        'quantity': take,
                        'expiryDate': batch.expiry_date,
                        'manufacturer': batch.manufacturer,
                        'unitPrice': batch.unit_price,
                    }
                    for batch, take in allocations
                ]
                row['shortfall'] = shortfall
            else:
                row['shortfall'] = max(required - row['available'], Decimal('0'))
        rows.append(row)
    return rows
