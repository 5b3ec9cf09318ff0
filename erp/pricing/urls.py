from django.urls import path
from .views import (
    price_list_list_create, price_list_detail, price_list_items, price_list_item_delete,
    check_price, pricing_panel_quote,
)

urlpatterns = [
    path('pricelist/', price_list_list_create, name='price-list-list-create'),
    path('pricelist/<int:pk>/', price_list_detail, name='price-list-detail'),
    path('pricelist/<int:pk>/items/', price_list_items, name='price-list-items'),
    path('pricelist/<int:pk>/items/<int:item_pk>/', price_list_item_delete, name='price-list-item-delete'),
    path('check-price/', check_price, name='check-price'),
    path('pricing-panel/quote/', pricing_panel_quote, name='pricing-panel-quote'),
]
