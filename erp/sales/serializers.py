from rest_framework import serializers
from erp.core.documents import TaxedLineSerializer, LINE_FIELDS, LINE_READ_ONLY, DOCUMENT_FIELDS, DOCUMENT_READ_ONLY
from .models import SalesQuotation, SalesQuotationItem, SalesOrder, SalesOrderItem


class SalesQuotationItemSerializer(TaxedLineSerializer):
    class Meta:
        model = SalesQuotationItem
        fields = LINE_FIELDS
        read_only_fields = LINE_READ_ONLY


class SalesOrderItemSerializer(TaxedLineSerializer):
    class Meta:
        model = SalesOrderItem
        fields = LINE_FIELDS
        read_only_fields = LINE_READ_ONLY


class SalesQuotationSerializer(serializers.ModelSerializer):
    items = SalesQuotationItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    customer_email = serializers.CharField(source='customer.email', read_only=True)
    sales_employee_name = serializers.CharField(source='sales_employee.username', read_only=True)

    class Meta:
        model = SalesQuotation
        fields = DOCUMENT_FIELDS + ['customer', 'customer_name', 'customer_email', 'contact_person', 'ref_number',
                                    'sales_employee', 'sales_employee_name', 'status', 'valid_until', 'items']
        read_only_fields = DOCUMENT_READ_ONLY


class SalesOrderSerializer(serializers.ModelSerializer):
    items = SalesOrderItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    quotation_number = serializers.CharField(source='quotation.document_number', read_only=True)

    class Meta:
        model = SalesOrder
        fields = DOCUMENT_FIELDS + ['customer', 'customer_name', 'quotation', 'quotation_number', 'contact_person',
                                    'ref_number', 'sales_employee', 'status', 'delivery_date', 'items']
        read_only_fields = DOCUMENT_READ_ONLY + ['status']
