from django.contrib import admin
from .models import Inventory, InventoryBatch, StockMovement, InventoryAdjustment


class InventoryBatchInline(admin.TabularInline):
    model = InventoryBatch
    extra = 0


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ['item', 'warehouse', 'quantity', 'committed', 'on_order', 'updated_at']
    list_filter = ['warehouse']
    search_fields = ['item__item_code', 'item__item_name']
    inlines = [InventoryBatchInline]


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['item', 'warehouse', 'movement_type', 'quantity', 'reference', 'reference_type', 'created_at']
    list_filter = ['movement_type', 'reference_type', 'warehouse']
    search_fields = ['item__item_code', 'reference']
    readonly_fields = ['created_at']


@admin.register(InventoryAdjustment)
class InventoryAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['item', 'warehouse', 'adjustment_type', 'quantity', 'reason', 'created_by', 'created_at']
    list_filter = ['adjustment_type', 'warehouse']
