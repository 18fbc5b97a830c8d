"""
URL configuration for the Falbites admin project.

Every resource lives under ``/api/v1/``; uploaded images are served from
``/uploads/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Falbites Admin Panel"
admin.site.site_title = "Falbites Admin Portal"
admin.site.index_title = "Welcome to the Falbites Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('falbites.core.urls')),
    path('api/v1/', include('falbites.users.urls')),
    path('api/v1/', include('falbites.franchises.urls')),
    path('api/v1/', include('falbites.vendors.urls')),
    path('api/v1/', include('falbites.catalog.urls')),
    path('api/v1/', include('falbites.subscriptions.urls')),
    path('api/v1/', include('falbites.delivery.urls')),
    path('api/v1/', include('falbites.reviews.urls')),
    re_path(r'^uploads/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
