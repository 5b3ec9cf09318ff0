from decimal import Decimal
from django.conf import settings
from django.db import models
from erp.catalog.models import Item, Resource
from erp.locations.models import Warehouse

QTY = dict(max_digits=14, decimal_places=3, default=Decimal('0'))
MONEY = dict(max_digits=14, decimal_places=2, default=Decimal('0.00'))


class Machine(models.Model):
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'ppc_machines'
        ordering = ['code']


class Operator(models.Model):
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'ppc_operators'
        ordering = ['code']


class Operation(models.Model):
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    default_minutes = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'ppc_operations'
        ordering = ['code']


class BOM(models.Model):
    """Bill of materials: components and resources needed to make one batch of a product"""
    BOM_TYPE_CHOICES = [
        ('Production', 'Production'),
        ('Sales', 'Sales'),
        ('Template', 'Template'),
    ]

    product = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='boms')
    product_desc = models.CharField(max_length=255, blank=True)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='boms')
    price_list = models.CharField(max_length=100, blank=True)
    bom_type = models.CharField(max_length=20, choices=BOM_TYPE_CHOICES, default='Production')
    x_quantity = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('1'))
    dist_rule = models.CharField(max_length=100, blank=True)
    project = models.CharField(max_length=100, blank=True)
    total_sum = models.DecimalField(**MONEY)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='boms_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def recalculate(self):
        """Refresh line totals and total_sum from quantities and unit prices"""
        total = Decimal('0')
        for line in list(self.items.all()) + list(self.resources.all()):
            line.total = (line.quantity * line.unit_price).quantize(Decimal('0.01'))
            line.save(update_fields=['total'])
            total += line.total
        self.total_sum = total
        self.save(update_fields=['total_sum', 'updated_at'])
        return total

    def __str__(self):
        return f"BOM {self.id} - {self.product.item_code}"

    class Meta:
        db_table = 'boms'
        ordering = ['-created_at']


class BOMItem(models.Model):
    ISSUE_METHOD_CHOICES = [
        ('Manual', 'Manual'),
        ('Backflush', 'Backflush'),
    ]

    bom = models.ForeignKey(BOM, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='bom_lines')
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    issue_method = models.CharField(max_length=20, choices=ISSUE_METHOD_CHOICES, default='Manual')
    unit_price = models.DecimalField(**MONEY)
    total = models.DecimalField(**MONEY)

    class Meta:
        db_table = 'bom_items'
        ordering = ['id']


class BOMResource(models.Model):
    bom = models.ForeignKey(BOM, on_delete=models.CASCADE, related_name='resources')
    resource = models.ForeignKey(Resource, on_delete=models.PROTECT, related_name='bom_lines')
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    unit_price = models.DecimalField(**MONEY)
    total = models.DecimalField(**MONEY)

    class Meta:
        db_table = 'bom_resources'
        ordering = ['id']


class ProductionOrder(models.Model):
    """Order to produce a quantity of a BOM's product"""
    ORDER_TYPE_CHOICES = [
        ('manufacture', 'Manufacture'),
        ('subcontract', 'Subcontract'),
        ('assemble', 'Assemble'),
    ]
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('In Progress', 'In Progress'),
        ('Transferred', 'Transferred'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
    ]

    production_doc_no = models.CharField(max_length=50, unique=True)
    bom = models.ForeignKey(BOM, on_delete=models.PROTECT, related_name='production_orders')
    product = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='production_orders')
    product_desc = models.CharField(max_length=255, blank=True)
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES, default='manufacture')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name='production_orders')
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    production_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    transfer_qty = models.DecimalField(**QTY)
    issued_qty = models.DecimalField(**QTY)
    received_qty = models.DecimalField(**QTY)
    rate = models.DecimalField(**MONEY)
    sales_orders = models.ManyToManyField('sales.SalesOrder', blank=True, related_name='production_orders')
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='production_orders_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.production_doc_no

    class Meta:
        db_table = 'production_orders'
        ordering = ['-created_at']


class ProductionOrderItem(models.Model):
    order = models.ForeignKey(ProductionOrder, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='production_order_lines')
    unit_qty = models.DecimalField(max_digits=14, decimal_places=3)
    required_qty = models.DecimalField(max_digits=14, decimal_places=3)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    unit_price = models.DecimalField(**MONEY)
    total = models.DecimalField(**MONEY)

    class Meta:
        db_table = 'production_order_items'
        ordering = ['id']


class ProductionOrderOperation(models.Model):
    order = models.ForeignKey(ProductionOrder, on_delete=models.CASCADE, related_name='operation_flow')
    operation = models.ForeignKey(Operation, on_delete=models.PROTECT, related_name='+')
    machine = models.ForeignKey(Machine, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    operator = models.ForeignKey(Operator, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    expected_start = models.DateTimeField(null=True, blank=True)
    expected_end = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'production_order_operations'
        ordering = ['id']


class IssueProduction(models.Model):
    """Component stock issued against a production order"""
    order = models.ForeignKey(ProductionOrder, on_delete=models.CASCADE, related_name='issues')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='+')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name='+')
    batch_number = models.CharField(max_length=100, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    rate = models.DecimalField(**MONEY)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'production_issues'
        ordering = ['-created_at']


class ReceiptProduction(models.Model):
    """Finished goods received from a production order"""
    order = models.ForeignKey(ProductionOrder, on_delete=models.CASCADE, related_name='receipts')
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='+')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name='+')
    batch_number = models.CharField(max_length=100, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'production_receipts'
        ordering = ['-created_at']
