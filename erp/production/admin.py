from django.contrib import admin
from .models import (
    Machine, Operator, Operation, BOM, BOMItem, BOMResource,
    ProductionOrder, ProductionOrderItem, ProductionOrderOperation, IssueProduction, ReceiptProduction
)


class BOMItemInline(admin.TabularInline):
    model = BOMItem
    extra = 0


class BOMResourceInline(admin.TabularInline):
    model = BOMResource
    extra = 0


@admin.register(BOM)
class BOMAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'bom_type', 'x_quantity', 'total_sum', 'created_at']
    list_filter = ['bom_type']
    inlines = [BOMItemInline, BOMResourceInline]


class ProductionOrderItemInline(admin.TabularInline):
    model = ProductionOrderItem
    extra = 0


class ProductionOrderOperationInline(admin.TabularInline):
    model = ProductionOrderOperation
    extra = 0


@admin.register(ProductionOrder)
class ProductionOrderAdmin(admin.ModelAdmin):
    list_display = ['production_doc_no', 'product', 'status', 'quantity', 'transfer_qty', 'issued_qty', 'received_qty']
    list_filter = ['status', 'order_type']
    search_fields = ['production_doc_no']
    inlines = [ProductionOrderItemInline, ProductionOrderOperationInline]


admin.site.register(Machine)
admin.site.register(Operator)
admin.site.register(Operation)
admin.site.register(IssueProduction)
admin.site.register(ReceiptProduction)
