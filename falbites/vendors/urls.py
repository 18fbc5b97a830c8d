from django.urls import path
from .views import vendor_list_create, vendor_detail, vendor_login

urlpatterns = [
    path('vendors/', vendor_list_create, name='vendor-list-create'),
    path('vendors/login/', vendor_login, name='vendor-login'),
    path('vendors/<int:pk>/', vendor_detail, name='vendor-detail'),
]
