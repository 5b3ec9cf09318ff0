import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from .models import Warehouse
from .serializers import WarehouseSerializer, BinLocationSerializer
from erp.core.utils import create_audit_log

logger = logging.getLogger('erp.locations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warehouse_list_create(request):
    """List all warehouses (newest first) or create a new warehouse"""
    if request.method == 'GET':
        warehouses = Warehouse.objects.all().prefetch_related('bins')
        search = request.query_params.get('search')
        if search:
            warehouses = warehouses.filter(Q(code__icontains=search) | Q(name__icontains=search))
        if request.query_params.get('active') in ('1', 'true'):
            warehouses = warehouses.filter(is_active=True)
        serializer = WarehouseSerializer(warehouses.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        logger.info(f"User {request.user.username} creating warehouse {request.data.get('code')}")
        serializer = WarehouseSerializer(data=request.data)
        if serializer.is_valid():
            warehouse = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Warehouse',
                object_id=str(warehouse.id),
                object_name=warehouse.name,
                object_reference=warehouse.code,
            )
            return Response(WarehouseSerializer(warehouse).data, status=status.HTTP_201_CREATED)
        logger.warning(f"Warehouse creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def warehouse_detail(request, pk):
    """Retrieve, update or delete a warehouse"""
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == 'GET':
        return Response(WarehouseSerializer(warehouse).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseSerializer(warehouse, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Warehouse {warehouse.code} updated by {request.user.username}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        logger.info(f"User {request.user.username} deleting warehouse {warehouse.code}")
        warehouse.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warehouse_bins(request, code):
    """List the bins of a warehouse or add a bin to it"""
    warehouse = get_object_or_404(Warehouse, code=code.strip().upper())

    if request.method == 'GET':
        serializer = BinLocationSerializer(warehouse.bins.all(), many=True)
        return Response(serializer.data)
    else:
        serializer = BinLocationSerializer(data=request.data, context={'warehouse': warehouse})
        if serializer.is_valid():
            bin_location = serializer.save(warehouse=warehouse)
            logger.info(f"Bin {bin_location.code} added to warehouse {warehouse.code}")
            return Response(WarehouseSerializer(warehouse).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
