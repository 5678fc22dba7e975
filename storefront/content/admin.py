from django.contrib import admin
from .models import Enquiry, HeroBanner


@admin.register(Enquiry)
class EnquiryAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'product_name', 'quantity', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'phone', 'email', 'product_name']
    list_editable = ['status']
    readonly_fields = ['created_at']


@admin.register(HeroBanner)
class HeroBannerAdmin(admin.ModelAdmin):
    list_display = ['title', 'display_order', 'is_active', 'transition_effect', 'updated_at']
    list_filter = ['is_active']
    list_editable = ['display_order', 'is_active']
    ordering = ['display_order', 'id']
