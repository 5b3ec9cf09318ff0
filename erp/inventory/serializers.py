from rest_framework import serializers
from .models import Inventory, InventoryBatch, StockMovement, InventoryAdjustment


class InventoryBatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryBatch
        fields = ['id', 'batch_number', 'quantity', 'expiry_date', 'manufacturer', 'unit_price', 'created_at']


class InventorySerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    available = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)
    batches = InventoryBatchSerializer(many=True, read_only=True)

    class Meta:
        model = Inventory
        fields = ['id', 'item', 'item_code', 'item_name', 'warehouse', 'warehouse_code', 'warehouse_name',
                  'quantity', 'committed', 'on_order', 'available', 'batches', 'updated_at']


class StockMovementSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)
    bin_code = serializers.CharField(source='bin_location.code', read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True)

    class Meta:
        model = StockMovement
        fields = ['id', 'item', 'item_code', 'warehouse', 'warehouse_code', 'bin_location', 'bin_code',
                  'movement_type', 'quantity', 'batch_number', 'reference', 'reference_type', 'remarks',
                  'created_by', 'created_by_username', 'created_at']


class InventoryAdjustmentSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True)

    class Meta:
        model = InventoryAdjustment
        fields = ['id', 'item', 'item_code', 'warehouse', 'warehouse_code', 'adjustment_type', 'quantity',
                  'batch_number', 'reason', 'notes', 'created_by', 'created_by_username', 'created_at']
        read_only_fields = ['created_by', 'created_at']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value
