from django.urls import path
from .views import (
    purchase_quotation_list_create, purchase_quotation_detail,
    purchase_order_list_create, purchase_order_detail,
    grn_list_create, grn_detail,
)

urlpatterns = [
    path('purchase-quotation/', purchase_quotation_list_create, name='purchase-quotation-list-create'),
    path('purchase-quotation/<int:pk>/', purchase_quotation_detail, name='purchase-quotation-detail'),
    path('purchase-order/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-order/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('grn/', grn_list_create, name='grn-list-create'),
    path('grn/<int:pk>/', grn_detail, name='grn-detail'),
]
