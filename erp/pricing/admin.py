from django.contrib import admin
from .models import PriceList, PriceListItem


class PriceListItemInline(admin.TabularInline):
    model = PriceListItem
    extra = 0


@admin.register(PriceList)
class PriceListAdmin(admin.ModelAdmin):
    list_display = ['name', 'currency', 'is_active', 'valid_from', 'valid_to', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']
    inlines = [PriceListItemInline]
