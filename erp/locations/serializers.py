from rest_framework import serializers
from .models import Warehouse, BinLocation


class BinLocationSerializer(serializers.ModelSerializer):
    max_capacity = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = BinLocation
        fields = ['id', 'code', 'aisle', 'rack', 'bin', 'max_capacity', 'created_at']
        read_only_fields = ['created_at']

    def validate_code(self, value):
        value = value.strip()
        warehouse = self.context.get('warehouse')
        if warehouse and warehouse.bins.filter(code=value).exists():
            raise serializers.ValidationError(f"Bin code '{value}' already exists")
        return value

    def validate_max_capacity(self, value):
        if value in (None, ''):
            return 0
        try:
            capacity = int(value)
        except (TypeError, ValueError):
            raise serializers.ValidationError('max_capacity must be a whole number')
        if capacity < 0:
            raise serializers.ValidationError('max_capacity cannot be negative')
        return capacity

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['max_capacity'] = instance.max_capacity
        return data


class WarehouseSerializer(serializers.ModelSerializer):
    code = serializers.CharField(max_length=50)
    bins = BinLocationSerializer(many=True, read_only=True)

    class Meta:
        model = Warehouse
        fields = ['id', 'code', 'name', 'account', 'company_name', 'phone', 'mobile',
                  'address_line1', 'address_line2', 'city', 'state', 'country', 'pin',
                  'warehouse_type', 'default_in_transit', 'is_active', 'bins',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_code(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError('This field may not be blank.')
        existing = Warehouse.objects.filter(code=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError('Warehouse code already exists')
        return value
