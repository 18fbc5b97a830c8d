from django.contrib import admin
from .models import Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['name', 'username', 'brand_name', 'created_at']
    search_fields = ['name', 'username', 'brand_name']
    ordering = ['-created_at']
    exclude = ['password']
