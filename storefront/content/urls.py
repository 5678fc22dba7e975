from django.urls import path
from .views import (
    enquiry_list_create, enquiry_update_status,
    hero_banner_list_create, hero_banner_admin_list, hero_banner_detail
)

urlpatterns = [
    path('enquiries', enquiry_list_create, name='enquiry-list-create'),
    path('enquiries/<int:pk>', enquiry_update_status, name='enquiry-update-status'),

    path('hero-banners', hero_banner_list_create, name='hero-banner-list-create'),
    path('hero-banners/admin', hero_banner_admin_list, name='hero-banner-admin-list'),
    path('hero-banners/<int:pk>', hero_banner_detail, name='hero-banner-detail'),
]
