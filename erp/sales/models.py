from django.conf import settings
from django.db import models
from erp.core.documents import TaxedDocument, TaxedLine
from erp.parties.models import Customer


class SalesQuotation(TaxedDocument):
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('Closed', 'Closed'),
        ('Cancelled', 'Cancelled'),
        ('Converted', 'Converted'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales_quotations')
    contact_person = models.CharField(max_length=200, blank=True)
    ref_number = models.CharField(max_length=100, blank=True)
    sales_employee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_quotations')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    valid_until = models.DateField(null=True, blank=True)

    class Meta(TaxedDocument.Meta):
        db_table = 'sales_quotations'


class SalesQuotationItem(TaxedLine):
    quotation = models.ForeignKey(SalesQuotation, on_delete=models.CASCADE, related_name='items')

    class Meta(TaxedLine.Meta):
        db_table = 'sales_quotation_items'


class SalesOrder(TaxedDocument):
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('Closed', 'Closed'),
        ('Cancelled', 'Cancelled'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales_orders')
    quotation = models.ForeignKey(SalesQuotation, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    contact_person = models.CharField(max_length=200, blank=True)
    ref_number = models.CharField(max_length=100, blank=True)
    sales_employee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    delivery_date = models.DateField(null=True, blank=True)

    class Meta(TaxedDocument.Meta):
        db_table = 'sales_orders'


class SalesOrderItem(TaxedLine):
    order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name='items')

    class Meta(TaxedLine.Meta):
        db_table = 'sales_order_items'
