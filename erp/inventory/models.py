from decimal import Decimal
from django.conf import settings
from django.db import models
from erp.catalog.models import Item
from erp.locations.models import Warehouse, BinLocation

QTY = dict(max_digits=14, decimal_places=3, default=Decimal('0'))


class Inventory(models.Model):
    """Stock of one item in one warehouse"""
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='inventory')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='inventory')
    quantity = models.DecimalField(**QTY)
    committed = models.DecimalField(**QTY)
    on_order = models.DecimalField(**QTY)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def available(self):
        return self.quantity - self.committed

    def __str__(self):
        return f"{self.item.item_code} @ {self.warehouse.code}: {self.quantity}"

    class Meta:
        db_table = 'inventory'
        unique_together = [['item', 'warehouse']]
        verbose_name_plural = 'inventory'


class InventoryBatch(models.Model):
    """Batch-wise breakdown of an inventory row"""
    inventory = models.ForeignKey(Inventory, on_delete=models.CASCADE, related_name='batches')
    batch_number = models.CharField(max_length=100)
    quantity = models.DecimalField(**QTY)
    expiry_date = models.DateField(null=True, blank=True)
    manufacturer = models.CharField(max_length=200, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.batch_number} ({self.quantity})"

    class Meta:
        db_table = 'inventory_batches'
        unique_together = [['inventory', 'batch_number']]
        ordering = ['expiry_date', 'created_at']


class StockMovement(models.Model):
    """Ledger of every quantity change"""
    MOVEMENT_TYPE_CHOICES = [
        ('IN', 'In'),
        ('OUT', 'Out'),
        ('STOCK_ISSUE', 'Stock Issue'),
        ('RECEIPT', 'Receipt'),
        ('ADJUSTMENT', 'Adjustment'),
    ]
    REFERENCE_TYPE_CHOICES = [
        ('GRN', 'Goods Receipt'),
        ('TRANSFER', 'Stock Transfer'),
        ('PRODUCTION', 'Production'),
        ('ADJUSTMENT', 'Adjustment'),
        ('DELIVERY', 'Delivery'),
    ]

    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='movements')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='movements')
    bin_location = models.ForeignKey(BinLocation, on_delete=models.SET_NULL, null=True, blank=True, related_name='movements')
    movement_type = models.CharField(max_length=20, choices=MOVEMENT_TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    batch_number = models.CharField(max_length=100, blank=True)
    reference = models.CharField(max_length=100, blank=True, db_index=True)
    reference_type = models.CharField(max_length=20, choices=REFERENCE_TYPE_CHOICES, blank=True)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_movements')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.movement_type} {self.quantity} {self.item.item_code} @ {self.warehouse.code}"

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at', '-id']


class InventoryAdjustment(models.Model):
    """Manual stock correction"""
    ADJUSTMENT_TYPE_CHOICES = [
        ('in', 'Stock In'),
        ('out', 'Stock Out'),
    ]

    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='adjustments')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='adjustments')
    adjustment_type = models.CharField(max_length=10, choices=ADJUSTMENT_TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    batch_number = models.CharField(max_length=100, blank=True)
    reason = models.CharField(max_length=200)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='inventory_adjustments')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.adjustment_type} {self.quantity} {self.item.item_code}"

    class Meta:
        db_table = 'inventory_adjustments'
        ordering = ['-created_at']
