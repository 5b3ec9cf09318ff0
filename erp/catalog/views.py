from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import ItemGroup, Item, Resource
from .filters import ItemFilter
from .serializers import ItemGroupSerializer, ItemSerializer, ResourceSerializer
from erp.core.utils import next_code, paginate, wants_pagination


# Item views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_list_create(request):
    """List items (filterable, optionally paginated) or create an item"""
    if request.method == 'GET':
        queryset = Item.objects.all().select_related('item_group')
        filterset = ItemFilter(request.query_params, queryset=queryset)
        queryset = filterset.qs.order_by('item_code')
        if wants_pagination(request):
            return paginate(request, queryset, ItemSerializer, default_limit=50)
        return Response(ItemSerializer(queryset, many=True).data)
    else:
        serializer = ItemSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_detail(request, pk):
    """Retrieve, update or delete an item"""
    item = get_object_or_404(Item, pk=pk)

    if request.method == 'GET':
        return Response(ItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_lookup(request):
    """Find an item by its exact code"""
    code = request.query_params.get('code', '').strip().upper()
    if not code:
        return Response({'error': 'code is required'}, status=status.HTTP_400_BAD_REQUEST)
    item = get_object_or_404(Item, item_code=code)
    return Response(ItemSerializer(item).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_next_code(request):
    prefix = request.query_params.get('prefix', 'ITM').strip().upper() or 'ITM'
    return Response({'code': next_code(Item, 'item_code', prefix)})


# ItemGroup views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_group_list_create(request):
    """List all item groups or create a new group"""
    if request.method == 'GET':
        return Response(ItemGroupSerializer(ItemGroup.objects.all(), many=True).data)
    else:
        serializer = ItemGroupSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_group_detail(request, pk):
    group = get_object_or_404(ItemGroup, pk=pk)

    if request.method == 'GET':
        return Response(ItemGroupSerializer(group).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ItemGroupSerializer(group, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        group.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Resource views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def resource_list_create(request):
    """List all resources or create a new resource"""
    if request.method == 'GET':
        resources = Resource.objects.all()
        resource_type = request.query_params.get('type')
        if resource_type:
            resources = resources.filter(resource_type=resource_type)
        return Response(ResourceSerializer(resources, many=True).data)
    else:
        serializer = ResourceSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def resource_detail(request, pk):
    resource = get_object_or_404(Resource, pk=pk)

    if request.method == 'GET':
        return Response(ResourceSerializer(resource).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ResourceSerializer(resource, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        resource.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
