import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import Machine, Operator, Operation, BOM, ProductionOrder, ProductionOrderOperation
from .serializers import (
    MachineSerializer, OperatorSerializer, OperationSerializer, BOMSerializer,
    ProductionOrderSerializer, ProductionOrderItemSerializer, ProductionOrderOperationSerializer
)
from .services import (
    create_order_from_bom, recalculate_order_lines, transfer_for_order, issue_for_order, receive_for_order,
    prefill_transfer,
)
from erp.core.documents import split_lines
from erp.core.exceptions import ERPError, error_response
from erp.core.utils import create_audit_log, paginate, wants_pagination
from erp.inventory.services import resolve_warehouse

logger = logging.getLogger(__name__)


# BOM views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def bom_list_create(request):
    """List BOMs or create a BOM with its component and resource lines"""
    if request.method == 'GET':
        boms = BOM.objects.all().select_related('product').prefetch_related('items__item', 'resources__resource')
        product_id = request.query_params.get('product')
        if product_id:
            boms = boms.filter(product_id=product_id)
        bom_type = request.query_params.get('bom_type')
        if bom_type:
            boms = boms.filter(bom_type=bom_type)
        if wants_pagination(request):
            return paginate(request, boms, BOMSerializer)
        return Response(BOMSerializer(boms, many=True).data)

    data, lines = split_lines(request, 'items', 'resources')
    serializer = BOMSerializer(data=data, context={'items_data': lines['items'], 'resources_data': lines['resources']})
    if serializer.is_valid():
        with transaction.atomic():
            bom = serializer.save(created_by=request.user)
        create_audit_log(request=request, action='create', model_name='BOM', object_id=str(bom.id),
                         object_name=bom.product.item_name, object_reference=bom.product.item_code,
                         changes={'total_sum': str(bom.total_sum)})
        return Response(BOMSerializer(bom).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def bom_detail(request, pk):
    """Retrieve, update (lines replaced when supplied) or delete a BOM"""
    bom = get_object_or_404(BOM, pk=pk)

    if request.method == 'GET':
        return Response(BOMSerializer(bom).data)
    elif request.method in ('PUT', 'PATCH'):
        data, lines = split_lines(request, 'items', 'resources')
        serializer = BOMSerializer(bom, data=data, partial=request.method == 'PATCH',
                                   context={'items_data': lines['items'], 'resources_data': lines['resources']})
        if serializer.is_valid():
            with transaction.atomic():
                bom = serializer.save()
            return Response(BOMSerializer(bom).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        if bom.production_orders.exists():
            return Response({'error': 'BOM is used by production orders'}, status=status.HTTP_400_BAD_REQUEST)
        bom.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# ProductionOrder views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def production_order_list_create(request):
    """List production orders (paginated) or create one from a BOM"""
    if request.method == 'GET':
        orders = ProductionOrder.objects.all().select_related('product', 'warehouse').prefetch_related(
            'items__item', 'operation_flow', 'issues', 'receipts')
        status_filter = request.query_params.get('status')
        if status_filter:
            orders = orders.filter(status=status_filter)
        return paginate(request, orders.order_by('-created_at'), ProductionOrderSerializer)

    data, lines = split_lines(request, 'items', 'operation_flow')
    serializer = ProductionOrderSerializer(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    items_data = None
    if lines['items']:
        item_serializer = ProductionOrderItemSerializer(data=lines['items'], many=True)
        if not item_serializer.is_valid():
            return Response({'items': item_serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
        items_data = item_serializer.validated_data
    operation_serializer = ProductionOrderOperationSerializer(data=lines['operation_flow'] or [], many=True)
    if not operation_serializer.is_valid():
        return Response({'operation_flow': operation_serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    fields = dict(serializer.validated_data)
    sales_orders = fields.pop('sales_orders', [])
    bom = fields.pop('bom')
    quantity = fields.pop('quantity')
    warehouse = fields.pop('warehouse')
    try:
        with transaction.atomic():
            order = create_order_from_bom(bom, quantity, warehouse, user=request.user, items_data=items_data, **fields)
            order.sales_orders.set(sales_orders)
            for operation in operation_serializer.validated_data:
                ProductionOrderOperation.objects.create(order=order, **operation)
    except ERPError as e:
        return error_response(e)

    create_audit_log(request=request, action='create', model_name='ProductionOrder', object_id=str(order.id),
                     object_name=order.product.item_name, object_reference=order.production_doc_no,
                     changes={'quantity': str(order.quantity), 'bom': bom.id})
    return Response(ProductionOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def production_order_detail(request, pk):
    """Retrieve, update header fields or delete a production order"""
    order = get_object_or_404(ProductionOrder, pk=pk)

    if request.method == 'GET':
        return Response(ProductionOrderSerializer(order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductionOrderSerializer(order, data=request.data, partial=True)
        if serializer.is_valid():
            previous_quantity = order.quantity
            with transaction.atomic():
                order = serializer.save()
                if order.quantity != previous_quantity:
                    recalculate_order_lines(order)
            return Response(ProductionOrderSerializer(order).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        if order.issues.exists() or order.receipts.exists():
            return Response({'error': 'Cannot delete a production order with issued or received stock'},
                            status=status.HTTP_400_BAD_REQUEST)
        order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def stock_transfer(request, pk):
    """Transfer component stock for a production order (?qty=)"""
    order = get_object_or_404(ProductionOrder, pk=pk)
    try:
        order, transferred = transfer_for_order(order, request.query_params.get('qty'), request.data, user=request.user)
    except ERPError as e:
        logger.warning(f"Stock transfer for {order.production_doc_no} rejected: {e.message}")
        return error_response(e)

    create_audit_log(request=request, action='stock_transfer', model_name='ProductionOrder', object_id=str(order.id),
                     object_reference=order.production_doc_no,
                     changes={'qty': request.query_params.get('qty'), 'entries': transferred})
    return Response({
        'message': 'Stock transfer successful',
        'transferred': transferred,
        'orderId': order.id,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_transfer_prefill(request, pk):
    """Suggested transfer rows with FEFO batch allocations"""
    order = get_object_or_404(ProductionOrder, pk=pk)
    return Response({
        'orderId': order.id,
        'productionDocNo': order.production_doc_no,
        'rows': prefill_transfer(order, request.query_params.get('qty')),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def issue_production(request, pk):
    """Issue component stock to a production order (?qty=)"""
    order = get_object_or_404(ProductionOrder, pk=pk)
    try:
        order, issued = issue_for_order(order, request.query_params.get('qty'), request.data, user=request.user)
    except ERPError as e:
        return error_response(e)

    create_audit_log(request=request, action='stock_issue', model_name='ProductionOrder', object_id=str(order.id),
                     object_reference=order.production_doc_no,
                     changes={'qty': request.query_params.get('qty'), 'lines': len(issued)})
    return Response({
        'success': True,
        'message': 'Stock issued successfully',
        'issued': len(issued),
        'order': ProductionOrderSerializer(order).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def receipt_production(request, pk):
    """Receive finished product from a production order (?qty=)"""
    order = get_object_or_404(ProductionOrder, pk=pk)
    warehouse = None
    if request.data.get('warehouse'):
        try:
            warehouse = resolve_warehouse(request.data.get('warehouse'))
        except ERPError as e:
            return error_response(e)
    try:
        order, receipt = receive_for_order(order, request.query_params.get('qty'), user=request.user,
                                           warehouse=warehouse, batch_number=request.data.get('batchNumber', ''))
    except ERPError as e:
        return error_response(e)

    create_audit_log(request=request, action='production_receipt', model_name='ProductionOrder',
                     object_id=str(order.id), object_reference=order.production_doc_no,
                     changes={'qty': str(receipt.quantity), 'warehouse': receipt.warehouse.code})
    return Response({
        'success': True,
        'message': 'Production receipt recorded',
        'order': ProductionOrderSerializer(order).data,
    }, status=status.HTTP_201_CREATED)


# PPC master views
def _master_list_create(request, model, serializer_class):
    if request.method == 'GET':
        return Response(serializer_class(model.objects.all(), many=True).data)
    serializer = serializer_class(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _master_detail(request, model, serializer_class, pk):
    instance = get_object_or_404(model, pk=pk)
    if request.method == 'GET':
        return Response(serializer_class(instance).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    instance.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def machine_list_create(request):
    return _master_list_create(request, Machine, MachineSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def machine_detail(request, pk):
    return _master_detail(request, Machine, MachineSerializer, pk)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def operator_list_create(request):
    return _master_list_create(request, Operator, OperatorSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def operator_detail(request, pk):
    return _master_detail(request, Operator, OperatorSerializer, pk)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def operation_list_create(request):
    return _master_list_create(request, Operation, OperationSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def operation_detail(request, pk):
    return _master_detail(request, Operation, OperationSerializer, pk)
