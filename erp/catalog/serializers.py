from rest_framework import serializers
from .models import ItemGroup, Item, Resource


class ItemGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = ItemGroup
        fields = ['id', 'name', 'description', 'created_at']


class ItemSerializer(serializers.ModelSerializer):
    item_group_name = serializers.CharField(source='item_group.name', read_only=True)

    class Meta:
        model = Item
        fields = ['id', 'item_code', 'item_name', 'description', 'item_group', 'item_group_name', 'uom',
                  'unit_price', 'gst_rate', 'managed_by', 'item_type', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_item_code(self, value):
        return value.strip().upper()


class ResourceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Resource
        fields = ['id', 'code', 'name', 'resource_type', 'unit_price', 'is_active', 'created_at']
