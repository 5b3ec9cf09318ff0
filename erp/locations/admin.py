from django.contrib import admin
from .models import Warehouse, BinLocation


class BinLocationInline(admin.TabularInline):
    model = BinLocation
    extra = 0


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'city', 'state', 'country', 'is_active']
    list_filter = ['is_active', 'state', 'country']
    search_fields = ['code', 'name']
    inlines = [BinLocationInline]
