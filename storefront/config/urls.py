"""
URL configuration for the storefront backend.

Every app mounts its routes under /api/; the admin site stays at /admin/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Storefront Management Admin Panel"
admin.site.site_title = "Storefront Admin Portal"
admin.site.index_title = "Welcome to the Storefront Admin Panel"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('storefront.core.urls')),
    path('api/', include('storefront.catalog.urls')),
    path('api/', include('storefront.orders.urls')),
    path('api/', include('storefront.delivery.urls')),
    path('api/', include('storefront.content.urls')),
    re_path(r'^uploads/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
