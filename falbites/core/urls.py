from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import AdminLoginView, register, me, audit_log_list, platform_settings, dashboard_stats_view

urlpatterns = [
    path('admin/login/', AdminLoginView.as_view(), name='admin-login'),
    path('admin/refresh/', TokenRefreshView.as_view(), name='admin-token-refresh'),
    path('admin/register/', register, name='admin-register'),
    path('admin/me/', me, name='admin-me'),
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('settings/', platform_settings, name='platform-settings'),
    path('dashboard/stats/', dashboard_stats_view, name='dashboard-stats'),
]
