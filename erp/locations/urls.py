from django.urls import path
from .views import warehouse_list_create, warehouse_detail, warehouse_bins

urlpatterns = [
    path('warehouse/', warehouse_list_create, name='warehouse-list-create'),
    path('warehouse/<int:pk>/', warehouse_detail, name='warehouse-detail'),
    path('warehouse/<str:code>/bins/', warehouse_bins, name='warehouse-bins'),
]
