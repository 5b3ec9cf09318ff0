from django.urls import path
from .views import (
    bom_list_create, bom_detail,
    production_order_list_create, production_order_detail,
    stock_transfer, stock_transfer_prefill, issue_production, receipt_production,
    machine_list_create, machine_detail, operator_list_create, operator_detail,
    operation_list_create, operation_detail,
)

urlpatterns = [
    path('bom/', bom_list_create, name='bom-list-create'),
    path('bom/<int:pk>/', bom_detail, name='bom-detail'),
    path('production-orders/', production_order_list_create, name='production-order-list-create'),
    path('production-orders/<int:pk>/', production_order_detail, name='production-order-detail'),
    path('stock-transfer/<int:pk>/', stock_transfer, name='stock-transfer'),
    path('stock-transfer/<int:pk>/prefill/', stock_transfer_prefill, name='stock-transfer-prefill'),
    path('issue-production/<int:pk>/', issue_production, name='issue-production'),
    path('receipt-production/<int:pk>/', receipt_production, name='receipt-production'),
    path('ppc/machines/', machine_list_create, name='machine-list-create'),
    path('ppc/machines/<int:pk>/', machine_detail, name='machine-detail'),
    path('ppc/operators/', operator_list_create, name='operator-list-create'),
    path('ppc/operators/<int:pk>/', operator_detail, name='operator-detail'),
    path('ppc/operations/', operation_list_create, name='operation-list-create'),
    path('ppc/operations/<int:pk>/', operation_detail, name='operation-detail'),
]
