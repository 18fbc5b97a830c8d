from django.urls import path
from .views import (
    subscription_list_create, subscription_search, subscription_detail,
    subscription_order_list, subscription_order_detail, subscription_order_delivery_status,
    daily_tip_list_create, daily_tip_detail
)

urlpatterns = [
    path('subscriptions/', subscription_list_create, name='subscription-list-create'),
    path('subscriptions/search/', subscription_search, name='subscription-search'),
    path('subscriptions/<int:pk>/', subscription_detail, name='subscription-detail'),
    path('subscription-orders/', subscription_order_list, name='subscription-order-list'),
    path('subscription-orders/<int:pk>/', subscription_order_detail, name='subscription-order-detail'),
    path('subscription-orders/<int:pk>/delivery-status/', subscription_order_delivery_status,
         name='subscription-order-delivery-status'),
    path('dailytips/', daily_tip_list_create, name='daily-tip-list-create'),
    path('dailytips/<int:pk>/', daily_tip_detail, name='daily-tip-detail'),
]
