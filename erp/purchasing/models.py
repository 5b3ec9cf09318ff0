from decimal import Decimal
from django.conf import settings
from django.db import models
from erp.core.documents import TaxedDocument, TaxedLine
from erp.locations.models import BinLocation
from erp.parties.models import Supplier


class PurchaseQuotation(TaxedDocument):
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('Closed', 'Closed'),
        ('Cancelled', 'Cancelled'),
        ('Converted', 'Converted'),
    ]

    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_quotations')
    contact_person = models.CharField(max_length=200, blank=True)
    ref_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    valid_until = models.DateField(null=True, blank=True)

    class Meta(TaxedDocument.Meta):
        db_table = 'purchase_quotations'


class PurchaseQuotationItem(TaxedLine):
    quotation = models.ForeignKey(PurchaseQuotation, on_delete=models.CASCADE, related_name='items')

    class Meta(TaxedLine.Meta):
        db_table = 'purchase_quotation_items'


class PurchaseOrder(TaxedDocument):
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('Partially Received', 'Partially Received'),
        ('Closed', 'Closed'),
        ('Cancelled', 'Cancelled'),
    ]

    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_orders')
    quotation = models.ForeignKey(PurchaseQuotation, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    contact_person = models.CharField(max_length=200, blank=True)
    ref_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    delivery_date = models.DateField(null=True, blank=True)

    def refresh_status(self):
        """Open, Partially Received or Closed from the lines' received quantities"""
        lines = list(self.items.all())
        if lines and all(line.received_quantity >= line.quantity for line in lines):
            self.status = 'Closed'
        elif any(line.received_quantity > 0 for line in lines):
            self.status = 'Partially Received'
        else:
            self.status = 'Open'
        self.save(update_fields=['status', 'updated_at'])
        return self.status

    class Meta(TaxedDocument.Meta):
        db_table = 'purchase_orders'


class PurchaseOrderItem(TaxedLine):
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    received_quantity = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('0'))

    @property
    def pending_quantity(self):
        return max(self.quantity - self.received_quantity, Decimal('0'))

    class Meta(TaxedLine.Meta):
        db_table = 'purchase_order_items'


class GRN(TaxedDocument):
    """Goods receipt note; saving one puts its lines into stock"""
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='grns')
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='grns')
    contact_person = models.CharField(max_length=200, blank=True)
    ref_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, default='Received')

    class Meta(TaxedDocument.Meta):
        db_table = 'grns'
        verbose_name = 'GRN'


class GRNItem(TaxedLine):
    grn = models.ForeignKey(GRN, on_delete=models.CASCADE, related_name='items')
    purchase_order_item = models.ForeignKey(PurchaseOrderItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='grn_lines')
    bin_location = models.ForeignKey(BinLocation, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')

    class Meta(TaxedLine.Meta):
        db_table = 'grn_items'


class GRNItemBatch(models.Model):
    grn_item = models.ForeignKey(GRNItem, on_delete=models.CASCADE, related_name='batches')
    batch_number = models.CharField(max_length=100)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    expiry_date = models.DateField(null=True, blank=True)
    manufacturer = models.CharField(max_length=200, blank=True)

    class Meta:
        db_table = 'grn_item_batches'
        ordering = ['id']


class GRNQualityCheck(models.Model):
    """Measured parameter for a received line, checked against its min/max"""
    grn_item = models.ForeignKey(GRNItem, on_delete=models.CASCADE, related_name='quality_checks')
    parameter = models.CharField(max_length=100)
    min_value = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    max_value = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    actual_value = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)

    @property
    def passed(self):
        if self.actual_value is None:
            return None
        if self.min_value is not None and self.actual_value < self.min_value:
            return False
        if self.max_value is not None and self.actual_value > self.max_value:
            return False
        return True

    class Meta:
        db_table = 'grn_quality_checks'
        ordering = ['id']


class PurchaseAttachment(models.Model):
    """File attached to a purchase quotation, order or GRN"""
    quotation = models.ForeignKey(PurchaseQuotation, on_delete=models.CASCADE, null=True, blank=True, related_name='attachments')
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, null=True, blank=True, related_name='attachments')
    grn = models.ForeignKey(GRN, on_delete=models.CASCADE, null=True, blank=True, related_name='attachments')
    file = models.FileField(upload_to='purchasing/%Y/%m/')
    file_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, blank=True)
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.file_name

    class Meta:
        db_table = 'purchase_attachments'
        ordering = ['uploaded_at']
