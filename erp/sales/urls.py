from django.urls import path
from .views import (
    sales_quotation_list_create, sales_quotation_detail, sales_quotation_email,
    sales_order_list_create, sales_order_detail, sales_order_cancel,
)

urlpatterns = [
    path('sales-quotation/', sales_quotation_list_create, name='sales-quotation-list-create'),
    path('sales-quotation/<int:pk>/', sales_quotation_detail, name='sales-quotation-detail'),
    path('sales-quotation/<int:pk>/email/', sales_quotation_email, name='sales-quotation-email'),
    path('sales-order/', sales_order_list_create, name='sales-order-list-create'),
    path('sales-order/<int:pk>/', sales_order_detail, name='sales-order-detail'),
    path('sales-order/<int:pk>/cancel/', sales_order_cancel, name='sales-order-cancel'),
]
