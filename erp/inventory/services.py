"""
Stock service layer.

Every function that changes quantities runs inside transaction.atomic() and
locks the inventory rows it touches, so a failure anywhere in a multi-row
operation (GRN, production issue, stock transfer) rolls the whole operation
back. Quantities never go below zero.
"""
import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils.dateparse import parse_date

from erp.catalog.models import Item
from erp.core.exceptions import BusinessRuleError, NotFoundError
from erp.core.pricing import to_decimal
from erp.locations.models import Warehouse, BinLocation
from .models import Inventory, InventoryBatch, StockMovement

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def pick(data, *keys, default=None):
    """First non-blank value among alternative key spellings"""
    for key in keys:
        value = data.get(key)
        if value not in (None, ''):
            return value
    return default


def resolve_item(value):
    """Item by primary key or item code"""
    if isinstance(value, Item):
        return value
    if value in (None, ''):
        raise BusinessRuleError('Item is required')
    lookup = {'pk': int(value)} if str(value).isdigit() else {'item_code': str(value).strip().upper()}
    item = Item.objects.filter(**lookup).first()
    if item is None:
        raise NotFoundError(f"Item '{value}' not found")
    return item


def resolve_warehouse(value):
    """Warehouse by primary key or code"""
    if isinstance(value, Warehouse):
        return value
    if value in (None, ''):
        raise BusinessRuleError('Warehouse is required')
    lookup = {'pk': int(value)} if str(value).isdigit() else {'code': str(value).strip().upper()}
    warehouse = Warehouse.objects.filter(**lookup).first()
    if warehouse is None:
        raise NotFoundError(f"Warehouse '{value}' not found")
    return warehouse


def resolve_bin(warehouse, value):
    """Bin of the given warehouse by primary key or code; blank means no bin"""
    if value in (None, ''):
        return None
    if isinstance(value, BinLocation):
        bin_location = value if value.warehouse_id == warehouse.id else None
    elif isinstance(value, int) or str(value).isdigit():
        bin_location = warehouse.bins.filter(pk=int(value)).first()
    else:
        bin_location = warehouse.bins.filter(code=str(value).strip()).first()
    if bin_location is None:
        raise BusinessRuleError(f"Bin '{value}' does not belong to warehouse {warehouse.code}")
    return bin_location


def _to_date(value):
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    return parse_date(str(value)[:10])


def get_locked_inventory(item, warehouse, create=False):
    queryset = Inventory.objects.select_for_update()
    if create:
        inventory, _ = queryset.get_or_create(item=item, warehouse=warehouse)
        return inventory
    return queryset.filter(item=item, warehouse=warehouse).first()


def _add_to_batch(inventory, batch_number, quantity, expiry_date=None, manufacturer='', unit_price=None):
    batch = inventory.batches.select_for_update().filter(batch_number=batch_number).first()
    if batch:
        batch.quantity += quantity
        batch.save(update_fields=['quantity'])
        return batch
    return InventoryBatch.objects.create(
        inventory=inventory,
        batch_number=batch_number,
        quantity=quantity,
        expiry_date=_to_date(expiry_date),
        manufacturer=manufacturer or '',
        unit_price=to_decimal(unit_price),
    )


def record_movement(item, warehouse, movement_type, quantity, reference='', reference_type='',
                    user=None, bin_location=None, batch_number='', remarks=''):
    return StockMovement.objects.create(
        item=item,
        warehouse=warehouse,
        bin_location=bin_location,
        movement_type=movement_type,
        quantity=quantity,
        batch_number=batch_number or '',
        reference=reference or '',
        reference_type=reference_type or '',
        remarks=remarks or '',
        created_by=user if user is not None and user.is_authenticated else None,
    )


@transaction.atomic
def receive_stock(item, warehouse, quantity, batches=None, reference='', reference_type='',
                  user=None, movement_type='IN', bin_location=None, reduce_on_order=True, remarks=''):
    """
    Add quantity to an item's stock in a warehouse.

    batches: optional list of dicts with batch_number/quantity/expiry_date/
    manufacturer/unit_price (camelCase keys accepted). Same batch numbers are
    merged; blank numbers or non-positive quantities are skipped.
    """
    quantity = to_decimal(quantity)
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be greater than zero')

    inventory = get_locked_inventory(item, warehouse, create=True)
    if reduce_on_order:
        inventory.on_order = max(inventory.on_order - quantity, ZERO)
    inventory.quantity += quantity
    inventory.save()

    for batch in batches or []:
        batch_number = str(pick(batch, 'batch_number', 'batchNumber', default='')).strip()
        batch_qty = to_decimal(pick(batch, 'quantity', 'qty', 'batchQty'))
        if not batch_number or batch_qty <= 0:
            logger.warning(f"Skipping batch without number or quantity for {item.item_code}: {batch}")
            continue
        _add_to_batch(
            inventory,
            batch_number,
            batch_qty,
            expiry_date=pick(batch, 'expiry_date', 'expiryDate'),
            manufacturer=pick(batch, 'manufacturer', default=''),
            unit_price=pick(batch, 'unit_price', 'unitPrice'),
        )

    record_movement(item, warehouse, movement_type, quantity, reference, reference_type,
                    user=user, bin_location=bin_location, remarks=remarks)
    return inventory


@transaction.atomic
def issue_stock(item, warehouse, quantity, batch_number=None, reference='', reference_type='',
                user=None, movement_type='OUT', bin_location=None, remarks=''):
    """Remove quantity from stock; the batch (when given) must hold enough"""
    quantity = to_decimal(quantity)
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be greater than zero')

    inventory = get_locked_inventory(item, warehouse)
    if inventory is None:
        raise NotFoundError(f"No inventory for item {item.item_code} in warehouse {warehouse.code}")
    if inventory.quantity < quantity:
        raise BusinessRuleError(
            f"Insufficient quantity for item {item.item_code} in warehouse {warehouse.code}: "
            f"available {inventory.quantity}, requested {quantity}"
        )

    if batch_number:
        batch = inventory.batches.select_for_update().filter(batch_number=batch_number).first()
        if batch is None:
            raise NotFoundError(f"Batch '{batch_number}' not found")
        if batch.quantity < quantity:
            raise BusinessRuleError(f"Insufficient quantity in batch '{batch_number}'")
        batch.quantity = max(batch.quantity - quantity, ZERO)
        batch.save(update_fields=['quantity'])

    inventory.quantity = max(inventory.quantity - quantity, ZERO)
    inventory.save()

    record_movement(item, warehouse, movement_type, quantity, reference, reference_type,
                    user=user, bin_location=bin_location, batch_number=batch_number or '', remarks=remarks)
    return inventory


def parse_transfer_entry(entry):
    """Resolve one stock transfer row into model objects"""
    quantity = to_decimal(pick(entry, 'quantity', 'qty'))
    item_ref = pick(entry, 'itemId', 'item', 'item_id')
    source_ref = pick(entry, 'sourceWarehouse', 'source_warehouse')
    destination_ref = pick(entry, 'destinationWarehouse', 'destination_warehouse')
    if not item_ref or not source_ref or not destination_ref or quantity <= 0:
        raise BusinessRuleError('Missing or invalid fields in entry')

    source = resolve_warehouse(source_ref)
    destination = resolve_warehouse(destination_ref)
    if source.id == destination.id:
        raise BusinessRuleError('Source and destination warehouse must differ')

    return {
        'item': resolve_item(item_ref),
        'source': source,
        'destination': destination,
        'quantity': quantity,
        'batch_number': str(pick(entry, 'batchNumber', 'batch_number', default='')).strip(),
        'expiry_date': pick(entry, 'expiryDate', 'expiry_date'),
        'manufacturer': pick(entry, 'manufacturer', default=''),
        'unit_price': pick(entry, 'unitPrice', 'unit_price'),
        'bin_location': resolve_bin(destination, pick(entry, 'selectedBin', 'bin', 'bin_location')),
    }


@transaction.atomic
def transfer_stock(entries, reference='', reference_type='TRANSFER', user=None, avg_cost_price=None):
    """
    Move stock between warehouses, batch by batch.

    For each entry: the source must hold the quantity (and the batch must,
    when one is named); the destination inventory and batch are created on
    demand, new batches priced at the entry's unit price or avg_cost_price.
    One OUT and one IN movement are written per entry, both tagged with the
    selected destination bin. Returns the number of entries transferred.
    """
    if not entries:
        raise BusinessRuleError('No transfer entries supplied')

    transferred = 0
    for raw_entry in entries:
        entry = parse_transfer_entry(raw_entry)
        item, quantity, batch_number = entry['item'], entry['quantity'], entry['batch_number']

        source_inventory = get_locked_inventory(item, entry['source'])
        if source_inventory is None or source_inventory.quantity < quantity:
            raise BusinessRuleError('Insufficient quantity in source warehouse')

        if batch_number:
            source_batch = source_inventory.batches.select_for_update().filter(batch_number=batch_number).first()
            if source_batch is None or source_batch.quantity < quantity:
                raise BusinessRuleError(f"Batch '{batch_number}' not found or insufficient quantity")
            source_batch.quantity -= quantity
            source_batch.save(update_fields=['quantity'])
            expiry_date = entry['expiry_date'] or source_batch.expiry_date
            manufacturer = entry['manufacturer'] or source_batch.manufacturer
        source_inventory.quantity -= quantity
        source_inventory.save()

        destination_inventory = get_locked_inventory(item, entry['destination'], create=True)
        destination_inventory.quantity += quantity
        destination_inventory.save()
        if batch_number:
            unit_price = entry['unit_price'] if entry['unit_price'] not in (None, '') else avg_cost_price
            _add_to_batch(destination_inventory, batch_number, quantity,
                          expiry_date=expiry_date, manufacturer=manufacturer, unit_price=unit_price)

        record_movement(item, entry['source'], 'OUT', quantity, reference, reference_type,
                        user=user, bin_location=entry['bin_location'], batch_number=batch_number,
                        remarks=f"Transfer to {entry['destination'].code}")
        record_movement(item, entry['destination'], 'IN', quantity, reference, reference_type,
                        user=user, bin_location=entry['bin_location'], batch_number=batch_number,
                        remarks=f"Transfer from {entry['source'].code}")
        transferred += 1

    logger.info(f"Stock transfer {reference or '-'}: {transferred} entries moved")
    return transferred


def adjust_stock(adjustment, user=None):
    """Apply a saved InventoryAdjustment to stock"""
    if adjustment.adjustment_type == 'in':
        batches = []
        if adjustment.batch_number:
            batches = [{'batch_number': adjustment.batch_number, 'quantity': adjustment.quantity}]
        return receive_stock(adjustment.item, adjustment.warehouse, adjustment.quantity, batches=batches,
                             reference=f"ADJ-{adjustment.id}", reference_type='ADJUSTMENT', user=user,
                             movement_type='ADJUSTMENT', reduce_on_order=False, remarks=adjustment.reason)
    return issue_stock(adjustment.item, adjustment.warehouse, adjustment.quantity,
                       batch_number=adjustment.batch_number or None,
                       reference=f"ADJ-{adjustment.id}", reference_type='ADJUSTMENT', user=user,
                       movement_type='ADJUSTMENT', remarks=adjustment.reason)


def available_batches(item, warehouse):
    """Batches with stock, earliest expiry first and undated batches last"""
    batches = InventoryBatch.objects.filter(
        inventory__item=item, inventory__warehouse=warehouse, quantity__gt=0
    )
    return sorted(batches, key=lambda b: (b.expiry_date is None, b.expiry_date or date.max, b.created_at))


def allocate_batches(item, warehouse, required_quantity):
    """
    First-expiry-first-out allocation of a required quantity across batches.
    Returns (allocations, shortfall) where allocations is a list of
    (batch, quantity) pairs.
    """
    remaining = to_decimal(required_quantity)
    allocations = []
    for batch in available_batches(item, warehouse):
        if remaining <= 0:
            break
        take = min(batch.quantity, remaining)
        allocations.append((batch, take))
        remaining -= take
    return allocations, max(remaining, ZERO)
