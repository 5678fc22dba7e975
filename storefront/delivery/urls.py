from django.urls import path
from .views import (
    delivery_check, serviceable_area_list_create, serviceable_area_detail, serviceable_area_bulk
)

urlpatterns = [
    path('delivery/check/<str:pincode>', delivery_check, name='delivery-check'),
    path('delivery', serviceable_area_list_create, name='serviceable-area-list-create'),
    path('delivery/bulk', serviceable_area_bulk, name='serviceable-area-bulk'),
    path('delivery/<int:pk>', serviceable_area_detail, name='serviceable-area-detail'),
]
