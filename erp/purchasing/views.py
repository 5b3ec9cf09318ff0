import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import PurchaseQuotation, PurchaseQuotationItem, PurchaseOrder, PurchaseOrderItem, GRN
from .serializers import (
    PurchaseQuotationSerializer, PurchaseQuotationItemSerializer,
    PurchaseOrderSerializer, PurchaseOrderItemSerializer,
    GRNSerializer, GRNItemSerializer,
)
from .services import require_supplier_and_items, attach_files, book_on_order, create_grn
from erp.core.documents import split_lines, validate_lines, write_lines
from erp.core.exceptions import ERPError, error_response
from erp.core.utils import create_audit_log, next_document_number, paginate

logger = logging.getLogger(__name__)


def _filtered(queryset, request, *params):
    for param in params:
        value = request.query_params.get(param)
        if value:
            queryset = queryset.filter(**{param: value})
    date_from = request.query_params.get('date_from')
    date_to = request.query_params.get('date_to')
    if date_from:
        queryset = queryset.filter(posting_date__gte=date_from)
    if date_to:
        queryset = queryset.filter(posting_date__lte=date_to)
    return queryset.order_by('-created_at', '-id')


# PurchaseQuotation views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_quotation_list_create(request):
    """List purchase quotations or create one"""
    if request.method == 'GET':
        quotations = PurchaseQuotation.objects.all().select_related('supplier').prefetch_related(
            'items__item', 'attachments')
        return paginate(request, _filtered(quotations, request, 'supplier', 'status'), PurchaseQuotationSerializer)

    data, payload = split_lines(request, 'items')
    items_data = payload['items']
    try:
        require_supplier_and_items(data, items_data)
    except ERPError as e:
        return error_response(e)

    serializer = PurchaseQuotationSerializer(data=data)
    lines, line_errors = validate_lines(PurchaseQuotationItemSerializer, items_data)
    serializer.is_valid()
    errors = dict(serializer.errors)
    if line_errors:
        errors['items'] = line_errors
    if errors:
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        quotation = serializer.save(created_by=request.user, document_number=next_document_number('PQ'))
        write_lines(quotation, PurchaseQuotationItem, 'quotation', lines)
        attach_files(quotation, 'quotation', request.FILES.getlist('attachments'), user=request.user)
    create_audit_log(request=request, action='create', model_name='PurchaseQuotation', object_id=str(quotation.id),
                     object_reference=quotation.document_number, changes={'grand_total': str(quotation.grand_total)})
    return Response(PurchaseQuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_quotation_detail(request, pk):
    """Retrieve, update (lines replaced when supplied) or delete a purchase quotation"""
    quotation = get_object_or_404(PurchaseQuotation, pk=pk)

    if request.method == 'GET':
        return Response(PurchaseQuotationSerializer(quotation).data)
    elif request.method in ('PUT', 'PATCH'):
        data, payload = split_lines(request, 'items')
        items_data = payload['items']
        serializer = PurchaseQuotationSerializer(quotation, data=data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        lines = None
        if items_data is not None:
            lines, line_errors = validate_lines(PurchaseQuotationItemSerializer, items_data)
            if line_errors or not lines:
                return Response({'items': line_errors or ['At least one item is required']},
                                status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            quotation = serializer.save()
            if lines is not None:
                write_lines(quotation, PurchaseQuotationItem, 'quotation', lines, replace=True)
            else:
                quotation.recalculate()
            attach_files(quotation, 'quotation', request.FILES.getlist('attachments'), user=request.user)
        return Response(PurchaseQuotationSerializer(quotation).data)
    else:
        quotation.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# PurchaseOrder views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or create one (optionally from a quotation)"""
    if request.method == 'GET':
        orders = PurchaseOrder.objects.all().select_related('supplier', 'quotation').prefetch_related(
            'items__item', 'attachments')
        return paginate(request, _filtered(orders, request, 'supplier', 'status'), PurchaseOrderSerializer)

    data, payload = split_lines(request, 'items')
    items_data = payload['items']
    serializer = PurchaseOrderSerializer(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quotation = serializer.validated_data.get('quotation')
    if items_data is None and quotation is not None:
        items_data = PurchaseQuotationItemSerializer(quotation.items.all(), many=True).data
    lines, line_errors = validate_lines(PurchaseOrderItemSerializer, items_data)
    if line_errors or not lines:
        return Response({'items': line_errors or ['At least one item is required']}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        order = serializer.save(created_by=request.user, document_number=next_document_number('PO'))
        write_lines(order, PurchaseOrderItem, 'order', lines)
        book_on_order(order)
        if quotation is not None:
            quotation.status = 'Converted'
            quotation.save(update_fields=['status', 'updated_at'])
        attach_files(order, 'order', request.FILES.getlist('attachments'), user=request.user)
    create_audit_log(request=request, action='create', model_name='PurchaseOrder', object_id=str(order.id),
                     object_reference=order.document_number, changes={'grand_total': str(order.grand_total)})
    return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, update header fields or delete a purchase order"""
    order = get_object_or_404(PurchaseOrder, pk=pk)

    if request.method == 'GET':
        return Response(PurchaseOrderSerializer(order).data)
    elif request.method == 'PATCH':
        serializer = PurchaseOrderSerializer(order, data=request.data, partial=True)
        if serializer.is_valid():
            order = serializer.save()
            order.recalculate()
            return Response(PurchaseOrderSerializer(order).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        if order.grns.exists():
            return Response({'error': 'Cannot delete a purchase order that has goods receipts'},
                            status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            book_on_order(order, sign=-1)
            order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# GRN views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def grn_list_create(request):
    """List GRNs (paged, newest first) or receive goods"""
    if request.method == 'GET':
        grns = GRN.objects.all().select_related('supplier', 'purchase_order').prefetch_related(
            'items__item', 'items__warehouse', 'items__batches', 'items__quality_checks', 'attachments')
        return paginate(request, _filtered(grns, request, 'supplier', 'purchase_order'), GRNSerializer)

    data, payload = split_lines(request, 'items')
    items_data = payload['items']
    if not items_data:
        return Response({'success': False, 'message': 'At least one item is required'},
                        status=status.HTTP_400_BAD_REQUEST)

    serializer = GRNSerializer(data=data)
    lines, line_errors = validate_lines(GRNItemSerializer, items_data)
    serializer.is_valid()
    errors = dict(serializer.errors)
    if line_errors:
        errors['items'] = line_errors
    if errors:
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        with transaction.atomic():
            grn = create_grn(serializer, lines, user=request.user)
            attach_files(grn, 'grn', request.FILES.getlist('attachments'), user=request.user)
    except ERPError as e:
        logger.warning(f"GRN rejected: {e.message}")
        return error_response(e)

    create_audit_log(request=request, action='stock_receive', model_name='GRN', object_id=str(grn.id),
                     object_reference=grn.document_number,
                     changes={'lines': len(lines), 'grand_total': str(grn.grand_total)})
    return Response(GRNSerializer(grn).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def grn_detail(request, pk):
    """Retrieve a GRN, edit its header or delete it (stock is not reversed)"""
    grn = get_object_or_404(GRN, pk=pk)

    if request.method == 'GET':
        return Response(GRNSerializer(grn).data)
    elif request.method == 'PATCH':
        serializer = GRNSerializer(grn, data=request.data, partial=True)
        if serializer.is_valid():
            grn = serializer.save()
            grn.recalculate()
            return Response(GRNSerializer(grn).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        create_audit_log(request=request, action='delete', model_name='GRN', object_id=str(grn.id),
                         object_reference=grn.document_number)
        grn.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
