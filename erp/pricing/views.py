import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import PriceList, PriceListItem
from .serializers import PriceListSerializer, PriceListItemSerializer, QuoteSerializer
from .services import resolve_price, get_price_list, build_quote
from erp.catalog.models import Item
from erp.core.exceptions import ERPError, error_response
from erp.core.utils import create_audit_log

logger = logging.getLogger(__name__)


# PriceList views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def price_list_list_create(request):
    """List all price lists or create a new price list"""
    if request.method == 'GET':
        price_lists = PriceList.objects.all()
        if request.query_params.get('active') in ('true', '1'):
            price_lists = price_lists.filter(is_active=True)
        serializer = PriceListSerializer(price_lists, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = PriceListSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def price_list_detail(request, pk):
    """Retrieve, update or delete a price list"""
    price_list = get_object_or_404(PriceList, pk=pk)

    if request.method == 'GET':
        serializer = PriceListSerializer(price_list)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PriceListSerializer(price_list, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        price_list.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def price_list_items(request, pk):
    """
    List a price list's item prices, or upsert them.

    POST accepts one {item, price} object or a list of them; an existing
    price for the same item is replaced.
    """
    price_list = get_object_or_404(PriceList, pk=pk)

    if request.method == 'GET':
        items = price_list.items.select_related('item')
        serializer = PriceListItemSerializer(items, many=True)
        return Response(serializer.data)

    rows = request.data if isinstance(request.data, list) else [request.data]
    serializer = PriceListItemSerializer(data=rows, many=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    saved = []
    with transaction.atomic():
        for row in serializer.validated_data:
            entry, created = PriceListItem.objects.update_or_create(
                price_list=price_list, item=row['item'], defaults={'price': row['price']}
            )
            saved.append(entry)
            create_audit_log(request=request, action='price_change', model_name='PriceListItem',
                             object_id=str(entry.id), object_name=row['item'].item_name,
                             object_reference=price_list.name,
                             changes={'price': str(row['price']), 'created': created})
    logger.info(f"{len(saved)} price(s) saved on price list {price_list.name}")
    data = PriceListItemSerializer(saved, many=True).data
    return Response(data if isinstance(request.data, list) else data[0], status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def price_list_item_delete(request, pk, item_pk):
    entry = get_object_or_404(PriceListItem, price_list_id=pk, pk=item_pk)
    entry.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def check_price(request):
    """Effective price of an item, optionally through a price list (?item=&price_list=)"""
    item_id = request.query_params.get('item')
    if not item_id:
        return Response({'success': False, 'message': 'item is required'}, status=status.HTTP_400_BAD_REQUEST)
    item = get_object_or_404(Item, pk=item_id)
    try:
        price_list = get_price_list(request.query_params.get('price_list'))
    except ERPError as e:
        return error_response(e)

    result = resolve_price(item, price_list)
    return Response({
        'item': item.id,
        'item_code': item.item_code,
        'item_name': item.item_name,
        **result,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def pricing_panel_quote(request):
    """Price a set of lines and compute document totals"""
    serializer = QuoteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        price_list = get_price_list(data.get('price_list'))
        quote = build_quote(data['lines'], price_list=price_list,
                            freight=data.get('freight', 0), rounding=data.get('rounding', 0))
    except ERPError as e:
        return error_response(e)
    return Response(quote)
