from django.urls import path
from .views import order_list_create, order_detail, order_update_status

urlpatterns = [
    path('orders', order_list_create, name='order-list-create'),
    path('orders/<int:pk>/status', order_update_status, name='order-update-status'),
    path('orders/<str:pk>', order_detail, name='order-detail'),
]
