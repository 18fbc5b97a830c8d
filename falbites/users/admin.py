from django.contrib import admin
from .models import Customer, WalletTransaction


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'mobile_number', 'role', 'wallet', 'blocked', 'assigned_franchise', 'created_at']
    list_filter = ['role', 'blocked', 'created_at']
    search_fields = ['name', 'mobile_number', 'email', 'refer_code']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ['customer', 'type', 'amount', 'title', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['customer__name', 'customer__mobile_number', 'reason']
    ordering = ['-created_at']
