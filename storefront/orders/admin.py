from django.contrib import admin
from .models import Order, OrderItem, OrderSequence


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['product', 'name', 'quantity', 'selected_color', 'fulfillment_type', 'price', 'mrp']
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'customer_name', 'total', 'payment_method', 'payment_status',
                    'order_status', 'is_deleted', 'created_at']
    list_filter = ['order_status', 'payment_status', 'payment_method', 'is_deleted', 'created_at']
    search_fields = ['order_number', 'customer_name', 'customer_email', 'customer_phone']
    ordering = ['-created_at']
    # status moves stock; change it through the API
    readonly_fields = ['order_number', 'order_status', 'created_at', 'updated_at']
    inlines = [OrderItemInline]


@admin.register(OrderSequence)
class OrderSequenceAdmin(admin.ModelAdmin):
    list_display = ['name', 'value']
    readonly_fields = ['name', 'value']
