from django.contrib import admin
from .models import Subscription, SubscriptionType, SubscriptionOrder, DeliveryDate, DailyTip


class SubscriptionTypeInline(admin.TabularInline):
    model = SubscriptionType
    extra = 0


class DeliveryDateInline(admin.TabularInline):
    model = DeliveryDate
    extra = 0


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'weight_or_count', 'tag', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['title', 'description']
    filter_horizontal = ['franchises']
    inlines = [SubscriptionTypeInline]


@admin.register(SubscriptionOrder)
class SubscriptionOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'subscription', 'payment_type', 'remaining_days', 'subscription_status', 'created_at']
    list_filter = ['payment_type', 'subscription_status', 'created_at']
    search_fields = ['user__name', 'user__mobile_number', 'address']
    ordering = ['-created_at']
    inlines = [DeliveryDateInline]


@admin.register(DailyTip)
class DailyTipAdmin(admin.ModelAdmin):
    list_display = ['title', 'subscription', 'created_at']
    list_filter = ['subscription']
    search_fields = ['title']
