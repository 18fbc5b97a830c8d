from django.core.validators import RegexValidator, MinValueValidator
from django.db import models
from django.utils import timezone

partner_mobile_validator = RegexValidator(
    regex=r'^[6-9]\d{9}$',
    message='Mobile number must be a valid 10 digit Indian number'
)


class DeliveryPartner(models.Model):
    """Rider who delivers subscription boxes for a franchise branch"""
    RANK_CHOICES = [
        ('Bronze', 'Bronze'),
        ('Platinum', 'Platinum'),
        ('Diamond', 'Diamond'),
    ]
    ONBOARDING_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    mobile_number = models.CharField(max_length=10, unique=True, validators=[partner_mobile_validator])
    vehicle_type = models.CharField(max_length=50)
    city = models.CharField(max_length=100)
    branch = models.CharField(max_length=100)
    profile_image_url = models.URLField(max_length=500, blank=True, default='')
    rank = models.CharField(max_length=20, choices=RANK_CHOICES, default='Bronze')
    wallet = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    online_status = models.BooleanField(default=False)
    onboarding_status = models.CharField(max_length=20, choices=ONBOARDING_CHOICES, default='pending')
    assigned_branch = models.ForeignKey(
        'franchises.Franchise', on_delete=models.SET_NULL, null=True, blank=True, related_name='delivery_partners'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'delivery_partners'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.first_name} {self.last_name}"


class PayoutTransaction(models.Model):
    transaction_id = models.CharField(max_length=20, unique=True)
    delivery_partner = models.ForeignKey(DeliveryPartner, on_delete=models.CASCADE, related_name='payouts')
    month_name = models.CharField(max_length=20)
    date = models.DateField()
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payout_transactions'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return self.transaction_id


class BoxReview(models.Model):
    """Delivery partner's report on a returned subscription box"""
    order = models.ForeignKey('subscriptions.SubscriptionOrder', on_delete=models.CASCADE, related_name='box_reviews')
    partner = models.ForeignKey(DeliveryPartner, on_delete=models.CASCADE, related_name='box_reviews')
    box_image = models.URLField(max_length=500, blank=True, default='')
    remark = models.CharField(max_length=500, blank=True, default='')
    delivery_time = models.CharField(max_length=20, blank=True, default='')
    is_box_picked = models.BooleanField(default=False)
    is_box_cleaned = models.BooleanField(default=False)
    status = models.CharField(max_length=50, blank=True, default='')
    date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'box_reviews'
        ordering = ['-date']

    def __str__(self):
        return f"Box review #{self.pk} (order {self.order_id})"


class BulkDelivery(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    name = models.CharField(max_length=255)
    address = models.TextField()
    phone_number = models.CharField(max_length=15)
    delivery_date = models.DateField()
    image_url = models.URLField(max_length=500)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bulk_deliveries'
        ordering = ['-created_at']
        verbose_name_plural = 'Bulk deliveries'

    def __str__(self):
        return f"{self.name} ({self.delivery_date})"


class UnavailableLocation(models.Model):
    """Area where the service is not offered yet"""
    city = models.CharField(max_length=100)
    area = models.CharField(max_length=255)
    pin_code = models.CharField(max_length=10)
    reason = models.CharField(max_length=255, default='Service currently unavailable')
    added_by = models.ForeignKey(
        'users.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='unavailable_locations'
    )
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'unavailable_locations'
        ordering = ['-date']

    def __str__(self):
        return f"{self.area}, {self.city}"


class Attendance(models.Model):
    """A delivery partner's attendance for one day; rows are opened as pending and then marked"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('present', 'Present'),
        ('absent', 'Absent'),
        ('holiday', 'Holiday'),
    ]

    partner = models.ForeignKey(DeliveryPartner, on_delete=models.CASCADE, related_name='attendance')
    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='absent')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'attendance'
        ordering = ['-date', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['partner', 'date'], name='unique_attendance_per_partner_day'),
        ]

    def __str__(self):
        return f"{self.partner} on {self.date}: {self.status}"
