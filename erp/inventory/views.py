import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import Inventory, StockMovement, InventoryAdjustment
from .serializers import (
    InventorySerializer, InventoryBatchSerializer, StockMovementSerializer, InventoryAdjustmentSerializer
)
from .services import adjust_stock, available_batches
from .reports import inventory_summary
from erp.catalog.models import Item
from erp.locations.models import Warehouse
from erp.core.exceptions import ERPError, error_response
from erp.core.utils import create_audit_log, paginate, wants_pagination

logger = logging.getLogger(__name__)


# Inventory views (read-only; quantities change through documents and adjustments)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_list(request):
    """List inventory rows with optional item / warehouse filters"""
    queryset = Inventory.objects.all().select_related('item', 'warehouse').prefetch_related('batches')
    item_id = request.query_params.get('item', None)
    warehouse_id = request.query_params.get('warehouse', None)
    if item_id:
        queryset = queryset.filter(item_id=item_id)
    if warehouse_id:
        queryset = queryset.filter(warehouse_id=warehouse_id)
    if request.query_params.get('in_stock') in ('1', 'true'):
        queryset = queryset.filter(quantity__gt=0)
    queryset = queryset.order_by('item__item_code', 'warehouse__code')
    if wants_pagination(request):
        return paginate(request, queryset, InventorySerializer, default_limit=50)
    return Response(InventorySerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_by_item(request, item_id):
    """Per-warehouse stock of an item plus totals"""
    item = get_object_or_404(Item, pk=item_id)
    rows = Inventory.objects.filter(item=item).select_related('item', 'warehouse').prefetch_related('batches')
    total = sum((row.quantity for row in rows), Decimal('0'))
    committed = sum((row.committed for row in rows), Decimal('0'))
    return Response({
        'item': item.id,
        'item_code': item.item_code,
        'total_quantity': total,
        'total_committed': committed,
        'warehouses': InventorySerializer(rows, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, item_id, warehouse_id):
    """Stock of an item in one warehouse"""
    inventory = get_object_or_404(Inventory, item_id=item_id, warehouse_id=warehouse_id)
    return Response(InventorySerializer(inventory).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_batches(request, item_id, warehouse_id):
    """Batches with stock, earliest expiry first"""
    item = get_object_or_404(Item, pk=item_id)
    warehouse = get_object_or_404(Warehouse, pk=warehouse_id)
    return Response(InventoryBatchSerializer(available_batches(item, warehouse), many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_summary_view(request):
    return Response(inventory_summary(request.query_params.get('warehouse')))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movement_list(request):
    """Stock ledger with item / warehouse / reference filters"""
    queryset = StockMovement.objects.all().select_related('item', 'warehouse', 'bin_location', 'created_by')
    for param, field in (('item', 'item_id'), ('warehouse', 'warehouse_id'),
                         ('reference', 'reference'), ('reference_type', 'reference_type'),
                         ('movement_type', 'movement_type')):
        value = request.query_params.get(param)
        if value:
            queryset = queryset.filter(**{field: value})
    return paginate(request, queryset, StockMovementSerializer, default_limit=50)


# InventoryAdjustment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_adjustment_list_create(request):
    """List inventory adjustments or post a new adjustment"""
    if request.method == 'GET':
        adjustments = InventoryAdjustment.objects.all().select_related('item', 'warehouse', 'created_by')
        return Response(InventoryAdjustmentSerializer(adjustments, many=True).data)

    serializer = InventoryAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        with transaction.atomic():
            adjustment = serializer.save(created_by=request.user)
            inventory = adjust_stock(adjustment, user=request.user)
    except ERPError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='stock_adjust',
        model_name='InventoryAdjustment',
        object_id=str(adjustment.id),
        object_name=adjustment.item.item_name,
        object_reference=adjustment.item.item_code,
        changes={
            'warehouse': adjustment.warehouse.code,
            'adjustment_type': adjustment.adjustment_type,
            'quantity': str(adjustment.quantity),
            'batch_number': adjustment.batch_number,
            'reason': adjustment.reason,
            'new_stock_quantity': str(inventory.quantity),
        }
    )
    logger.info(f"Adjustment {adjustment.id} applied: {adjustment.adjustment_type} {adjustment.quantity} {adjustment.item.item_code}")
    return Response(InventoryAdjustmentSerializer(adjustment).data, status=status.HTTP_201_CREATED)
