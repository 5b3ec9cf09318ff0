"""
Abstract document / line models shared by quotations, orders and GRNs,
plus the helpers that write lines and refresh totals.
"""
import json
from decimal import Decimal
from django.conf import settings
from django.db import models
from rest_framework import serializers

from .pricing import compute_line, compute_totals

MONEY = dict(max_digits=14, decimal_places=2, default=Decimal('0.00'))


class TaxedDocument(models.Model):
    """Header of a priced document; totals are always derived from its lines"""
    document_number = models.CharField(max_length=50, unique=True)
    posting_date = models.DateField(null=True, blank=True)
    document_date = models.DateField(null=True, blank=True)
    remarks = models.TextField(blank=True)
    freight = models.DecimalField(**MONEY)
    rounding = models.DecimalField(**MONEY)
    total_before_discount = models.DecimalField(**MONEY)
    total_discount = models.DecimalField(**MONEY)
    gst_total = models.DecimalField(**MONEY)
    grand_total = models.DecimalField(**MONEY)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def recalculate(self):
        lines = [
            {'quantity': line.quantity, 'unit_price': line.unit_price,
             'total_amount': line.total_amount, 'tax_amount': line.tax_amount}
            for line in self.items.all()
        ]
        totals = compute_totals(lines, freight=self.freight, rounding=self.rounding)
        for field in ('total_before_discount', 'total_discount', 'gst_total', 'grand_total'):
            setattr(self, field, totals[field])
        self.save(update_fields=['total_before_discount', 'total_discount', 'gst_total', 'grand_total', 'updated_at'])
        return totals

    def __str__(self):
        return self.document_number

    class Meta:
        abstract = True
        ordering = ['-created_at']


class TaxedLine(models.Model):
    """Priced line: quantity x (unit price - discount) plus GST or IGST"""
    TAX_OPTION_CHOICES = [
        ('GST', 'GST'),
        ('IGST', 'IGST'),
    ]

    item = models.ForeignKey('catalog.Item', on_delete=models.PROTECT, related_name='+')
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    description = models.CharField(max_length=255, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    unit_price = models.DecimalField(**MONEY)
    discount = models.DecimalField(**MONEY)
    tax_option = models.CharField(max_length=5, choices=TAX_OPTION_CHOICES, default='GST')
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    igst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    price_after_discount = models.DecimalField(**MONEY)
    total_amount = models.DecimalField(**MONEY)
    gst_amount = models.DecimalField(**MONEY)
    cgst_amount = models.DecimalField(**MONEY)
    sgst_amount = models.DecimalField(**MONEY)
    igst_amount = models.DecimalField(**MONEY)

    @property
    def tax_amount(self):
        return self.igst_amount if self.tax_option == 'IGST' else self.gst_amount

    def apply_amounts(self):
        amounts = compute_line(self.quantity, self.unit_price, self.discount,
                               self.gst_rate, self.igst_rate, self.tax_option)
        amounts.pop('tax_amount')
        for field, value in amounts.items():
            setattr(self, field, value)

    def save(self, *args, **kwargs):
        self.apply_amounts()
        super().save(*args, **kwargs)

    class Meta:
        abstract = True
        ordering = ['id']


LINE_FIELDS = ['id', 'item', 'item_code', 'item_name', 'warehouse', 'description', 'quantity', 'unit_price',
               'discount', 'tax_option', 'gst_rate', 'igst_rate', 'price_after_discount', 'total_amount',
               'gst_amount', 'cgst_amount', 'sgst_amount', 'igst_amount']
LINE_READ_ONLY = ['price_after_discount', 'total_amount', 'gst_amount', 'cgst_amount', 'sgst_amount', 'igst_amount']
DOCUMENT_FIELDS = ['id', 'document_number', 'posting_date', 'document_date', 'remarks', 'freight', 'rounding',
                   'total_before_discount', 'total_discount', 'gst_total', 'grand_total',
                   'created_by', 'created_at', 'updated_at']
DOCUMENT_READ_ONLY = ['document_number', 'total_before_discount', 'total_discount', 'gst_total', 'grand_total',
                      'created_by', 'created_at', 'updated_at']


class TaxedLineSerializer(serializers.ModelSerializer):
    """Base for line serializers; subclasses set Meta.model"""
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    item_name = serializers.CharField(source='item.item_name', read_only=True)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value


def validate_lines(line_serializer_class, lines_data):
    """Validate raw line dicts; returns (validated_lines, errors)"""
    serializer = line_serializer_class(data=lines_data or [], many=True)
    if serializer.is_valid():
        return serializer.validated_data, None
    return None, serializer.errors


def write_lines(document, line_model, parent_field, validated_lines, replace=False):
    """Create document lines and refresh the document totals"""
    if replace:
        document.items.all().delete()
    created = [line_model.objects.create(**{parent_field: document}, **line) for line in validated_lines]
    document.recalculate()
    return created


def split_lines(request, *keys):
    """
    Header fields plus the named line lists from a request body.

    Multipart bodies carry lines as JSON strings next to uploaded files; the
    files are left out of the header dict.
    """
    raw = request.data
    if hasattr(raw, 'getlist'):
        data = {key: raw.get(key) for key in raw.keys() if key not in request.FILES}
    else:
        data = dict(raw)
    lines = {}
    for key in keys:
        value = data.pop(key, None)
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else None
            except ValueError:
                value = None
        lines[key] = value
    return data, lines
