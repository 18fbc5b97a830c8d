from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['id', 'rating', 'delivery_partner', 'subscription', 'user', 'franchise', 'date']
    list_filter = ['rating', 'date']
    search_fields = ['description']
