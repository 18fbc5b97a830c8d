from django.urls import path
from .views import (
    delivery_partner_list, delivery_partner_detail, change_onboarding_status,
    payout_create, payout_history,
    box_review_list, box_review_delete,
    bulk_delivery_list_create, bulk_delivery_detail, bulk_delivery_status,
    unavailable_location_list_create, unavailable_location_detail,
    attendance_list, mark_attendance
)

urlpatterns = [
    path('delivery-partners/', delivery_partner_list, name='delivery-partner-list'),
    path('delivery-partners/change-status/<int:pk>/', change_onboarding_status, name='delivery-partner-change-status'),
    path('delivery-partners/<int:pk>/', delivery_partner_detail, name='delivery-partner-detail'),
    path('payout/', payout_create, name='payout-create'),
    path('payout/<int:partner_id>/', payout_history, name='payout-history'),
    path('boxes/', box_review_list, name='box-review-list'),
    path('boxes/<int:pk>/', box_review_delete, name='box-review-delete'),
    path('bulk-delivery/', bulk_delivery_list_create, name='bulk-delivery-list-create'),
    path('bulk-delivery/status/<int:pk>/', bulk_delivery_status, name='bulk-delivery-status'),
    path('bulk-delivery/<int:pk>/', bulk_delivery_detail, name='bulk-delivery-detail'),
    path('unavailable-locations/', unavailable_location_list_create, name='unavailable-location-list-create'),
    path('unavailable-locations/<int:pk>/', unavailable_location_detail, name='unavailable-location-detail'),
    path('attendance/', attendance_list, name='attendance-list'),
    path('attendance/mark/', mark_attendance, name='attendance-mark'),
]
