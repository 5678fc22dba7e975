from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, signup, user_me,
    audit_log_list, audit_log_detail,
    dashboard_stats, health
)

urlpatterns = [
    # Auth endpoints
    path('auth/signup', signup, name='signup'),
    path('auth/login', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me', user_me, name='user-me'),

    # AuditLog endpoints
    path('audit-logs', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>', audit_log_detail, name='audit-log-detail'),

    path('dashboard/stats', dashboard_stats, name='dashboard-stats'),
    path('health', health, name='health'),
]
