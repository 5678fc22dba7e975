from django.urls import path
from .views import (
    category_list_create, category_detail,
    product_list_create, product_search, product_detail, product_stock_update,
    product_review_create, product_review_approve, product_review_delete,
    ai_generate, ai_regenerate,
)

urlpatterns = [
    # Category endpoints
    path('categories', category_list_create, name='category-list-create'),
    path('categories/<int:pk>', category_detail, name='category-detail'),

    # Product endpoints
    path('products', product_list_create, name='product-list-create'),
    path('products/search', product_search, name='product-search'),
    path('products/<int:pk>', product_detail, name='product-detail'),
    path('products/<int:pk>/stock', product_stock_update, name='product-stock-update'),

    # Review endpoints
    path('products/<int:pk>/reviews', product_review_create, name='product-review-create'),
    path('products/<int:pk>/reviews/<int:review_id>/approve', product_review_approve, name='product-review-approve'),
    path('products/<int:pk>/reviews/<int:review_id>', product_review_delete, name='product-review-delete'),

    # Generative product data
    path('ai/generate', ai_generate, name='ai-generate'),
    path('ai/regenerate', ai_regenerate, name='ai-regenerate'),
]
