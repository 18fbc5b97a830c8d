from django.db import models


class Franchise(models.Model):
    """Delivery branch with its service radius and pricing"""
    name = models.CharField(max_length=100)
    city_name = models.CharField(max_length=100)
    branch_name = models.CharField(max_length=100)
    location_name = models.CharField(max_length=255, blank=True, default='')
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    total_delivery_radius = models.FloatField(help_text="in km")
    free_delivery_radius = models.FloatField(help_text="in km")
    charge_per_extra_km = models.FloatField(help_text="in rupees")
    assigned_manager = models.ForeignKey(
        'users.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='managed_franchises'
    )
    polygon_coordinates = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'franchises'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.city_name})"
