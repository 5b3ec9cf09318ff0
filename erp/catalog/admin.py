from django.contrib import admin
from .models import ItemGroup, Item, Resource


@admin.register(ItemGroup)
class ItemGroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['item_code', 'item_name', 'item_group', 'uom', 'unit_price', 'managed_by', 'is_active']
    list_filter = ['managed_by', 'item_type', 'is_active', 'item_group']
    search_fields = ['item_code', 'item_name']


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'resource_type', 'unit_price', 'is_active']
    list_filter = ['resource_type']
