from django.contrib import admin
from .models import ServiceableArea


@admin.register(ServiceableArea)
class ServiceableAreaAdmin(admin.ModelAdmin):
    list_display = ['pincode', 'city', 'state', 'is_active', 'updated_at']
    list_filter = ['is_active', 'state']
    search_fields = ['pincode', 'city', 'state']
    ordering = ['pincode']
