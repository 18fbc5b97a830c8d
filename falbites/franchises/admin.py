from django.contrib import admin
from .models import Franchise


@admin.register(Franchise)
class FranchiseAdmin(admin.ModelAdmin):
    list_display = ['name', 'city_name', 'branch_name', 'assigned_manager', 'total_delivery_radius', 'created_at']
    list_filter = ['city_name']
    search_fields = ['name', 'city_name', 'branch_name']
    ordering = ['name']
