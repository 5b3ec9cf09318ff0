from django.contrib import admin
from .models import (
    PurchaseQuotation, PurchaseQuotationItem, PurchaseOrder, PurchaseOrderItem,
    GRN, GRNItem, GRNItemBatch, GRNQualityCheck, PurchaseAttachment
)


class PurchaseQuotationItemInline(admin.TabularInline):
    model = PurchaseQuotationItem
    extra = 0


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ['received_quantity']


class GRNItemInline(admin.TabularInline):
    model = GRNItem
    extra = 0


@admin.register(PurchaseQuotation)
class PurchaseQuotationAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'supplier', 'status', 'grand_total', 'created_at']
    list_filter = ['status']
    search_fields = ['document_number', 'supplier__name']
    inlines = [PurchaseQuotationItemInline]


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'supplier', 'status', 'grand_total', 'created_at']
    list_filter = ['status']
    search_fields = ['document_number', 'supplier__name']
    inlines = [PurchaseOrderItemInline]


@admin.register(GRN)
class GRNAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'supplier', 'purchase_order', 'grand_total', 'created_at']
    search_fields = ['document_number', 'supplier__name']
    inlines = [GRNItemInline]


@admin.register(GRNItemBatch)
class GRNItemBatchAdmin(admin.ModelAdmin):
    list_display = ['grn_item', 'batch_number', 'quantity', 'expiry_date']
    search_fields = ['batch_number']


@admin.register(GRNQualityCheck)
class GRNQualityCheckAdmin(admin.ModelAdmin):
    list_display = ['grn_item', 'parameter', 'min_value', 'max_value', 'actual_value']


@admin.register(PurchaseAttachment)
class PurchaseAttachmentAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'quotation', 'order', 'grn', 'uploaded_at']
