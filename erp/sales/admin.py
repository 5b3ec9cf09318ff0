from django.contrib import admin
from .models import SalesQuotation, SalesQuotationItem, SalesOrder, SalesOrderItem


class SalesQuotationItemInline(admin.TabularInline):
    model = SalesQuotationItem
    extra = 0


class SalesOrderItemInline(admin.TabularInline):
    model = SalesOrderItem
    extra = 0


@admin.register(SalesQuotation)
class SalesQuotationAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'customer', 'status', 'grand_total', 'created_at']
    list_filter = ['status']
    search_fields = ['document_number', 'customer__name']
    inlines = [SalesQuotationItemInline]


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = ['document_number', 'customer', 'quotation', 'status', 'grand_total', 'created_at']
    list_filter = ['status']
    search_fields = ['document_number', 'customer__name']
    inlines = [SalesOrderItemInline]
