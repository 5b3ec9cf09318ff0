import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import SalesQuotation, SalesQuotationItem, SalesOrder, SalesOrderItem
from .serializers import (
    SalesQuotationSerializer, SalesQuotationItemSerializer, SalesOrderSerializer, SalesOrderItemSerializer
)
from .services import commit_order_stock, cancel_order, send_quotation_email
from erp.core.documents import split_lines, validate_lines, write_lines
from erp.core.exceptions import ERPError, error_response
from erp.core.utils import create_audit_log, next_document_number, paginate

logger = logging.getLogger(__name__)


# SalesQuotation views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sales_quotation_list_create(request):
    """List sales quotations (newest first) or create one"""
    if request.method == 'GET':
        quotations = SalesQuotation.objects.all().select_related('customer').prefetch_related('items__item')
        for param, field in (('customer', 'customer_id'), ('status', 'status')):
            value = request.query_params.get(param)
            if value:
                quotations = quotations.filter(**{field: value})
        return paginate(request, quotations.order_by('-created_at'), SalesQuotationSerializer)

    data, payload = split_lines(request, 'items')
    items_data = payload['items']
    serializer = SalesQuotationSerializer(data=data)
    lines, line_errors = validate_lines(SalesQuotationItemSerializer, items_data)
    serializer.is_valid()
    errors = dict(serializer.errors)
    if line_errors or not lines:
        errors['items'] = line_errors or ['At least one item is required']
    if errors:
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        quotation = serializer.save(created_by=request.user, document_number=next_document_number('SQ'))
        write_lines(quotation, SalesQuotationItem, 'quotation', lines)
    create_audit_log(request=request, action='create', model_name='SalesQuotation', object_id=str(quotation.id),
                     object_reference=quotation.document_number, changes={'grand_total': str(quotation.grand_total)})
    return Response(SalesQuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sales_quotation_detail(request, pk):
    """Retrieve, update (lines replaced when supplied) or delete a sales quotation"""
    quotation = get_object_or_404(SalesQuotation, pk=pk)

    if request.method == 'GET':
        return Response(SalesQuotationSerializer(quotation).data)
    elif request.method in ('PUT', 'PATCH'):
        data, payload = split_lines(request, 'items')
        items_data = payload['items']
        serializer = SalesQuotationSerializer(quotation, data=data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        lines = None
        if items_data is not None:
            lines, line_errors = validate_lines(SalesQuotationItemSerializer, items_data)
            if line_errors:
                return Response({'items': line_errors}, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            quotation = serializer.save()
            if lines is not None:
                write_lines(quotation, SalesQuotationItem, 'quotation', lines, replace=True)
            else:
                quotation.recalculate()
        return Response(SalesQuotationSerializer(quotation).data)
    else:
        quotation.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sales_quotation_email(request, pk):
    """Mail a quotation to the given addresses"""
    quotation = get_object_or_404(SalesQuotation, pk=pk)
    emails = request.data.get('emails') or []
    if isinstance(emails, str):
        emails = emails.split(',')
    try:
        sent_to = send_quotation_email(quotation, emails, sender=request.user)
    except ERPError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Failed to send quotation {quotation.document_number}: {str(e)}", exc_info=True)
        return Response({'success': False, 'message': 'Failed to send email'}, status=status.HTTP_502_BAD_GATEWAY)
    return Response({'success': True, 'message': 'Quotation email sent', 'recipients': sent_to})


# SalesOrder views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sales_order_list_create(request):
    """List sales orders or create one (optionally from a quotation)"""
    if request.method == 'GET':
        orders = SalesOrder.objects.all().select_related('customer', 'quotation').prefetch_related('items__item')
        for param, field in (('customer', 'customer_id'), ('status', 'status')):
            value = request.query_params.get(param)
            if value:
                orders = orders.filter(**{field: value})
        return paginate(request, orders.order_by('-created_at'), SalesOrderSerializer)

    data, payload = split_lines(request, 'items')
    items_data = payload['items']
    serializer = SalesOrderSerializer(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quotation = serializer.validated_data.get('quotation')
    if items_data is None and quotation is not None:
        items_data = SalesQuotationItemSerializer(quotation.items.all(), many=True).data
    lines, line_errors = validate_lines(SalesOrderItemSerializer, items_data)
    if line_errors or not lines:
        return Response({'items': line_errors or ['At least one item is required']}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        order = serializer.save(created_by=request.user, document_number=next_document_number('SO'))
        write_lines(order, SalesOrderItem, 'order', lines)
        commit_order_stock(order)
        if quotation is not None:
            quotation.status = 'Converted'
            quotation.save(update_fields=['status', 'updated_at'])
    create_audit_log(request=request, action='create', model_name='SalesOrder', object_id=str(order.id),
                     object_reference=order.document_number, changes={'grand_total': str(order.grand_total)})
    return Response(SalesOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sales_order_detail(request, pk):
    """Retrieve, update header fields or delete a sales order"""
    order = get_object_or_404(SalesOrder, pk=pk)

    if request.method == 'GET':
        return Response(SalesOrderSerializer(order).data)
    elif request.method == 'PATCH':
        serializer = SalesOrderSerializer(order, data=request.data, partial=True)
        if serializer.is_valid():
            order = serializer.save()
            order.recalculate()
            return Response(SalesOrderSerializer(order).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        with transaction.atomic():
            if order.status != 'Cancelled':
                commit_order_stock(order, sign=-1)
            order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sales_order_cancel(request, pk):
    """Cancel a sales order and release its stock commitment"""
    order = get_object_or_404(SalesOrder, pk=pk)
    try:
        order = cancel_order(order)
    except ERPError as e:
        return error_response(e)
    return Response(SalesOrderSerializer(order).data)
