from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone


class Review(models.Model):
    """Customer review of a delivery partner for a subscription"""
    description = models.TextField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    image = models.CharField(max_length=500, blank=True, default='')
    date = models.DateTimeField(default=timezone.now)
    delivery_partner = models.ForeignKey('delivery.DeliveryPartner', on_delete=models.CASCADE, related_name='reviews')
    subscription = models.ForeignKey('subscriptions.Subscription', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey('users.Customer', on_delete=models.CASCADE, related_name='reviews')
    franchise = models.ForeignKey(
        'franchises.Franchise', on_delete=models.SET_NULL, null=True, blank=True, related_name='reviews'
    )

    class Meta:
        db_table = 'reviews'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['delivery_partner', '-date'], name='reviews_deliver_6e2b9f_idx'),
            models.Index(fields=['subscription', '-date'], name='reviews_subscri_0c7d4a_idx'),
        ]

    def __str__(self):
        return f"{self.rating}/5 for partner {self.delivery_partner_id}"
