from rest_framework import serializers
from .models import (
    Machine, Operator, Operation, BOM, BOMItem, BOMResource,
    ProductionOrder, ProductionOrderItem, ProductionOrderOperation, IssueProduction, ReceiptProduction
)


class MachineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Machine
        fields = ['id', 'code', 'name', 'description', 'is_active', 'created_at']


class OperatorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Operator
        fields = ['id', 'code', 'name', 'email', 'phone', 'is_active', 'created_at']


class OperationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Operation
        fields = ['id', 'code', 'name', 'description', 'default_minutes', 'created_at']


class BOMItemSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    item_name = serializers.CharField(source='item.item_name', read_only=True)

    class Meta:
        model = BOMItem
        fields = ['id', 'item', 'item_code', 'item_name', 'quantity', 'warehouse', 'issue_method', 'unit_price', 'total']
        read_only_fields = ['total']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value


class BOMResourceSerializer(serializers.ModelSerializer):
    resource_code = serializers.CharField(source='resource.code', read_only=True)
    resource_name = serializers.CharField(source='resource.name', read_only=True)

    class Meta:
        model = BOMResource
        fields = ['id', 'resource', 'resource_code', 'resource_name', 'quantity', 'warehouse', 'unit_price', 'total']
        read_only_fields = ['total']


class BOMSerializer(serializers.ModelSerializer):
    items = BOMItemSerializer(many=True, read_only=True)
    resources = BOMResourceSerializer(many=True, read_only=True)
    product_code = serializers.CharField(source='product.item_code', read_only=True)
    product_name = serializers.CharField(source='product.item_name', read_only=True)

    class Meta:
        model = BOM
        fields = ['id', 'product', 'product_code', 'product_name', 'product_desc', 'warehouse', 'price_list',
                  'bom_type', 'x_quantity', 'dist_rule', 'project', 'total_sum', 'items', 'resources',
                  'created_by', 'created_at', 'updated_at']
        read_only_fields = ['total_sum', 'created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        items_data = self.context.get('items_data')
        resources_data = self.context.get('resources_data')
        errors = {}
        self._items = self._resources = None
        if items_data is not None:
            item_serializer = BOMItemSerializer(data=items_data, many=True)
            if item_serializer.is_valid():
                self._items = item_serializer.validated_data
            else:
                errors['items'] = item_serializer.errors
        if resources_data is not None:
            resource_serializer = BOMResourceSerializer(data=resources_data, many=True)
            if resource_serializer.is_valid():
                self._resources = resource_serializer.validated_data
            else:
                errors['resources'] = resource_serializer.errors
        if not self.instance and not self._items:
            errors.setdefault('items', ['At least one component is required'])
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def _write_lines(self, bom):
        if self._items is not None:
            bom.items.all().delete()
            for line in self._items:
                BOMItem.objects.create(bom=bom, **line)
        if self._resources is not None:
            bom.resources.all().delete()
            for line in self._resources:
                BOMResource.objects.create(bom=bom, **line)
        bom.recalculate()

    def create(self, validated_data):
        bom = super().create(validated_data)
        self._write_lines(bom)
        return bom

    def update(self, instance, validated_data):
        bom = super().update(instance, validated_data)
        self._write_lines(bom)
        return bom


class ProductionOrderItemSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    managed_by = serializers.CharField(source='item.managed_by', read_only=True)

    class Meta:
        model = ProductionOrderItem
        fields = ['id', 'item', 'item_code', 'item_name', 'managed_by', 'unit_qty', 'required_qty',
                  'warehouse', 'unit_price', 'total']
        read_only_fields = ['required_qty', 'total']


class ProductionOrderOperationSerializer(serializers.ModelSerializer):
    operation_name = serializers.CharField(source='operation.name', read_only=True)
    machine_name = serializers.CharField(source='machine.name', read_only=True)
    operator_name = serializers.CharField(source='operator.name', read_only=True)

    class Meta:
        model = ProductionOrderOperation
        fields = ['id', 'operation', 'operation_name', 'machine', 'machine_name', 'operator', 'operator_name',
                  'expected_start', 'expected_end']


class IssueProductionSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)

    class Meta:
        model = IssueProduction
        fields = ['id', 'item', 'item_code', 'warehouse', 'warehouse_code', 'batch_number', 'quantity', 'rate', 'created_at']


class ReceiptProductionSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)

    class Meta:
        model = ReceiptProduction
        fields = ['id', 'item', 'item_code', 'warehouse', 'warehouse_code', 'batch_number', 'quantity', 'created_at']


class ProductionOrderSerializer(serializers.ModelSerializer):
    items = ProductionOrderItemSerializer(many=True, read_only=True)
    operation_flow = ProductionOrderOperationSerializer(many=True, read_only=True)
    issues = IssueProductionSerializer(many=True, read_only=True)
    receipts = ReceiptProductionSerializer(many=True, read_only=True)
    product_code = serializers.CharField(source='product.item_code', read_only=True)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)

    class Meta:
        model = ProductionOrder
        fields = ['id', 'production_doc_no', 'bom', 'product', 'product_code', 'product_desc', 'order_type',
                  'status', 'priority', 'warehouse', 'warehouse_code', 'quantity', 'production_date', 'due_date',
                  'transfer_qty', 'issued_qty', 'received_qty', 'rate', 'sales_orders', 'remarks',
                  'items', 'operation_flow', 'issues', 'receipts', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['production_doc_no', 'product', 'transfer_qty', 'issued_qty', 'received_qty', 'rate',
                            'created_by', 'created_at', 'updated_at']
        extra_kwargs = {'sales_orders': {'required': False}}

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value

    def validate_bom(self, value):
        if self.instance is not None and value != self.instance.bom:
            raise serializers.ValidationError('BOM cannot be changed once the order is created')
        return value
