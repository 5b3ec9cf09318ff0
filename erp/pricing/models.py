from django.db import models
from django.utils import timezone
from erp.catalog.models import Item


class PriceList(models.Model):
    """Named set of item prices, optionally limited to a validity window"""
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)
    currency = models.CharField(max_length=3, default='INR')
    is_active = models.BooleanField(default=True)
    valid_from = models.DateField(null=True, blank=True)
    valid_to = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def is_valid_on(self, on_date=None):
        on_date = on_date or timezone.localdate()
        if not self.is_active:
            return False
        if self.valid_from and on_date < self.valid_from:
            return False
        if self.valid_to and on_date > self.valid_to:
            return False
        return True

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'price_lists'
        ordering = ['name']


class PriceListItem(models.Model):
    price_list = models.ForeignKey(PriceList, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='price_list_items')
    price = models.DecimalField(max_digits=14, decimal_places=2)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'price_list_items'
        unique_together = [['price_list', 'item']]
        ordering = ['item__item_code']
