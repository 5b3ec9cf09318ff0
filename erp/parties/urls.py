from django.urls import path
from .views import (
    customer_list_create, customer_detail, customer_next_code,
    supplier_list_create, supplier_detail, supplier_next_code,
)

urlpatterns = [
    path('customers/', customer_list_create, name='customer-list-create'),
    path('customers/next-code/', customer_next_code, name='customer-next-code'),
    path('customers/<int:pk>/', customer_detail, name='customer-detail'),
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/next-code/', supplier_next_code, name='supplier-next-code'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
]
