from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['customer_code', 'name', 'email', 'company', 'is_active']
    list_filter = ['company', 'is_active']
    search_fields = ['customer_code', 'name', 'email']
    filter_horizontal = ['assigned_agents']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['supplier_code', 'name', 'contact_person', 'phone', 'is_active']
    search_fields = ['supplier_code', 'name']
