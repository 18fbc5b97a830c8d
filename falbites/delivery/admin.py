from django.contrib import admin
from .models import DeliveryPartner, PayoutTransaction, BoxReview, BulkDelivery, UnavailableLocation, Attendance


@admin.register(DeliveryPartner)
class DeliveryPartnerAdmin(admin.ModelAdmin):
    list_display = ['first_name', 'last_name', 'mobile_number', 'city', 'branch', 'rank', 'wallet', 'onboarding_status']
    list_filter = ['onboarding_status', 'rank', 'city']
    search_fields = ['first_name', 'last_name', 'mobile_number']


@admin.register(PayoutTransaction)
class PayoutTransactionAdmin(admin.ModelAdmin):
    list_display = ['transaction_id', 'delivery_partner', 'month_name', 'date', 'amount']
    list_filter = ['month_name', 'date']
    search_fields = ['transaction_id']
    readonly_fields = ['transaction_id', 'created_at', 'updated_at']


@admin.register(BoxReview)
class BoxReviewAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'partner', 'is_box_picked', 'is_box_cleaned', 'status', 'date']
    list_filter = ['is_box_picked', 'is_box_cleaned']


@admin.register(BulkDelivery)
class BulkDeliveryAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone_number', 'delivery_date', 'status', 'created_at']
    list_filter = ['status', 'delivery_date']
    search_fields = ['name', 'address', 'phone_number']


@admin.register(UnavailableLocation)
class UnavailableLocationAdmin(admin.ModelAdmin):
    list_display = ['city', 'area', 'pin_code', 'reason', 'date']
    search_fields = ['city', 'area', 'pin_code']


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['partner', 'date', 'status']
    list_filter = ['status', 'date']
    search_fields = ['partner__first_name', 'partner__last_name', 'partner__mobile_number']
