from rest_framework import serializers
from erp.core.documents import TaxedLineSerializer, LINE_FIELDS, LINE_READ_ONLY, DOCUMENT_FIELDS, DOCUMENT_READ_ONLY
from .models import (
    PurchaseQuotation, PurchaseQuotationItem, PurchaseOrder, PurchaseOrderItem,
    GRN, GRNItem, GRNItemBatch, GRNQualityCheck, PurchaseAttachment
)


class PurchaseAttachmentSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseAttachment
        fields = ['id', 'file_name', 'content_type', 'url', 'uploaded_by', 'uploaded_at']

    def get_url(self, obj):
        return obj.file.url if obj.file else None


class PurchaseQuotationItemSerializer(TaxedLineSerializer):
    class Meta:
        model = PurchaseQuotationItem
        fields = LINE_FIELDS
        read_only_fields = LINE_READ_ONLY


class PurchaseOrderItemSerializer(TaxedLineSerializer):
    pending_quantity = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)

    class Meta:
        model = PurchaseOrderItem
        fields = LINE_FIELDS + ['received_quantity', 'pending_quantity']
        read_only_fields = LINE_READ_ONLY + ['received_quantity']


class GRNItemBatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = GRNItemBatch
        fields = ['id', 'batch_number', 'quantity', 'expiry_date', 'manufacturer']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Batch quantity must be greater than zero')
        return value


class GRNQualityCheckSerializer(serializers.ModelSerializer):
    passed = serializers.BooleanField(read_only=True, allow_null=True)

    class Meta:
        model = GRNQualityCheck
        fields = ['id', 'parameter', 'min_value', 'max_value', 'actual_value', 'passed']


class GRNItemSerializer(TaxedLineSerializer):
    batches = GRNItemBatchSerializer(many=True, required=False)
    quality_checks = GRNQualityCheckSerializer(many=True, required=False)
    warehouse_code = serializers.CharField(source='warehouse.code', read_only=True)

    class Meta:
        model = GRNItem
        fields = LINE_FIELDS + ['warehouse_code', 'purchase_order_item', 'bin_location', 'batches', 'quality_checks']
        read_only_fields = LINE_READ_ONLY
        extra_kwargs = {'warehouse': {'required': True, 'allow_null': False}}

    def validate(self, attrs):
        bin_location = attrs.get('bin_location')
        if bin_location is not None and bin_location.warehouse_id != attrs['warehouse'].id:
            raise serializers.ValidationError({'bin_location': 'Bin does not belong to the selected warehouse'})
        batches = attrs.get('batches') or []
        if batches:
            batch_total = sum(batch['quantity'] for batch in batches)
            if batch_total != attrs['quantity']:
                raise serializers.ValidationError({'batches': 'Batch quantities must add up to the line quantity'})
        return attrs


class PurchaseQuotationSerializer(serializers.ModelSerializer):
    items = PurchaseQuotationItemSerializer(many=True, read_only=True)
    attachments = PurchaseAttachmentSerializer(many=True, read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    supplier_code = serializers.CharField(source='supplier.supplier_code', read_only=True)

    class Meta:
        model = PurchaseQuotation
        fields = DOCUMENT_FIELDS + ['supplier', 'supplier_name', 'supplier_code', 'contact_person', 'ref_number',
                                    'status', 'valid_until', 'items', 'attachments']
        read_only_fields = DOCUMENT_READ_ONLY


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True, read_only=True)
    attachments = PurchaseAttachmentSerializer(many=True, read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    quotation_number = serializers.CharField(source='quotation.document_number', read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = DOCUMENT_FIELDS + ['supplier', 'supplier_name', 'quotation', 'quotation_number', 'contact_person',
                                    'ref_number', 'status', 'delivery_date', 'items', 'attachments']
        read_only_fields = DOCUMENT_READ_ONLY + ['status']


class GRNSerializer(serializers.ModelSerializer):
    items = GRNItemSerializer(many=True, read_only=True)
    attachments = PurchaseAttachmentSerializer(many=True, read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    purchase_order_number = serializers.CharField(source='purchase_order.document_number', read_only=True)

    class Meta:
        model = GRN
        fields = DOCUMENT_FIELDS + ['supplier', 'supplier_name', 'purchase_order', 'purchase_order_number',
                                    'contact_person', 'ref_number', 'status', 'items', 'attachments']
        read_only_fields = DOCUMENT_READ_ONLY + ['status']
