from django.conf import settings
from django.db import models


class Warehouse(models.Model):
    """Warehouses; stock is held per item and warehouse"""
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    account = models.CharField(max_length=100, blank=True)
    company_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    mobile = models.CharField(max_length=20, blank=True)
    address_line1 = models.CharField(max_length=255, blank=True)
    address_line2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    pin = models.CharField(max_length=20, blank=True)
    warehouse_type = models.CharField(max_length=50, blank=True)
    default_in_transit = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='warehouses_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'warehouses'
        ordering = ['-created_at']


class BinLocation(models.Model):
    """Addressable storage location (aisle / rack / bin) inside a warehouse"""
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='bins')
    code = models.CharField(max_length=50)
    aisle = models.CharField(max_length=50, blank=True)
    rack = models.CharField(max_length=50, blank=True)
    bin = models.CharField(max_length=50)
    max_capacity = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.warehouse.code}/{self.code}"

    class Meta:
        db_table = 'bin_locations'
        unique_together = [['warehouse', 'code']]
        ordering = ['code']
