from django.urls import path
from .views import (
    inventory_list, inventory_by_item, inventory_detail, inventory_batches, inventory_summary_view,
    stock_movement_list, inventory_adjustment_list_create,
)

urlpatterns = [
    path('inventory/', inventory_list, name='inventory-list'),
    path('inventory/summary/', inventory_summary_view, name='inventory-summary'),
    path('inventory/<int:item_id>/', inventory_by_item, name='inventory-by-item'),
    path('inventory/<int:item_id>/<int:warehouse_id>/', inventory_detail, name='inventory-detail'),
    path('inventory-batch/<int:item_id>/<int:warehouse_id>/', inventory_batches, name='inventory-batches'),
    path('stock-movements/', stock_movement_list, name='stock-movement-list'),
    path('inventory-adjustments/', inventory_adjustment_list_create, name='inventory-adjustment-list-create'),
]
