from decimal import Decimal
from django.db import models


class ItemGroup(models.Model):
    """Item groups"""
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'item_groups'
        ordering = ['name']


class Item(models.Model):
    """Stock-keeping item; products are items that a BOM can produce"""
    MANAGED_BY_CHOICES = [
        ('none', 'None'),
        ('batch', 'Batch'),
        ('serial', 'Serial'),
    ]
    ITEM_TYPE_CHOICES = [
        ('item', 'Item'),
        ('product', 'Product'),
    ]

    item_code = models.CharField(max_length=50, unique=True)
    item_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    item_group = models.ForeignKey(ItemGroup, on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    uom = models.CharField(max_length=20, default='NOS')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    managed_by = models.CharField(max_length=10, choices=MANAGED_BY_CHOICES, default='none')
    item_type = models.CharField(max_length=10, choices=ITEM_TYPE_CHOICES, default='item')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_batch_managed(self):
        return self.managed_by == 'batch'

    def __str__(self):
        return f"{self.item_code} - {self.item_name}"

    class Meta:
        db_table = 'items'
        ordering = ['item_code']


class Resource(models.Model):
    """Machine, labour or other resource consumed by a BOM"""
    RESOURCE_TYPE_CHOICES = [
        ('machine', 'Machine'),
        ('labour', 'Labour'),
        ('other', 'Other'),
    ]

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    resource_type = models.CharField(max_length=20, choices=RESOURCE_TYPE_CHOICES, default='other')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'resources'
        ordering = ['code']
