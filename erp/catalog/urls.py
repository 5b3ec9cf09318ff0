from django.urls import path
from .views import (
    item_list_create, item_detail, item_lookup, item_next_code,
    item_group_list_create, item_group_detail,
    resource_list_create, resource_detail,
)

urlpatterns = [
    path('items/', item_list_create, name='item-list-create'),
    path('items/lookup/', item_lookup, name='item-lookup'),
    path('items/next-code/', item_next_code, name='item-next-code'),
    path('items/<int:pk>/', item_detail, name='item-detail'),
    path('item-groups/', item_group_list_create, name='item-group-list-create'),
    path('item-groups/<int:pk>/', item_group_detail, name='item-group-detail'),
    path('resources/', resource_list_create, name='resource-list-create'),
    path('resources/<int:pk>/', resource_detail, name='resource-detail'),
]
