from django.contrib import admin
from .models import Category, Product, ProductColor, ProductReview


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'parent', 'display_order', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name']
    ordering = ['display_order', 'name']
    readonly_fields = ['slug']


class ProductColorInline(admin.TabularInline):
    model = ProductColor
    extra = 0
    fields = ['name', 'hex', 'sku', 'stock', 'status', 'position']
    readonly_fields = ['status']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'category', 'price', 'stock', 'stock_status', 'fulfillment_type', 'is_deleted']
    list_filter = ['stock_status', 'fulfillment_type', 'is_deleted', 'is_best_seller', 'category']
    search_fields = ['name', 'sku', 'short_description']
    ordering = ['-created_at']
    readonly_fields = ['stock_status', 'average_rating', 'review_count', 'discount_percent', 'created_at', 'updated_at']
    inlines = [ProductColorInline]


@admin.register(ProductReview)
class ProductReviewAdmin(admin.ModelAdmin):
    list_display = ['product', 'name', 'rating', 'is_approved', 'created_at']
    list_filter = ['is_approved', 'rating']
    search_fields = ['product__name', 'name', 'comment']
    ordering = ['-created_at']
