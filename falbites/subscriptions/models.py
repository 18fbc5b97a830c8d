from django.db import models


class Subscription(models.Model):
    """Recurring delivery plan offered in selected franchises"""
    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=100)
    weight_or_count = models.CharField(max_length=100)
    tag = models.CharField(max_length=50, blank=True, default='')
    image_urls = models.JSONField(default=list, blank=True, help_text="First entry is the main image")
    franchises = models.ManyToManyField('franchises.Franchise', blank=True, related_name='subscriptions')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscriptions'
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class SubscriptionType(models.Model):
    subscription = models.ForeignKey(Subscription, on_delete=models.CASCADE, related_name='types')
    title = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    without_discount_price = models.DecimalField(max_digits=10, decimal_places=2)
    small_description = models.CharField(max_length=200, blank=True, default='')
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'subscription_types'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.subscription.title} - {self.title}"


class SubscriptionOrder(models.Model):
    """A customer's purchase of a subscription plan"""
    PAYMENT_CHOICES = [
        ('COD', 'Cash on delivery'),
        ('ONLINE', 'Online'),
        ('FAILED', 'Failed'),
    ]
    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('Inactive', 'Inactive'),
        ('Cancelled', 'Cancelled'),
    ]

    user = models.ForeignKey('users.Customer', on_delete=models.CASCADE, related_name='subscription_orders')
    subscription = models.ForeignKey(Subscription, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    franchise = models.ForeignKey('franchises.Franchise', on_delete=models.SET_NULL, null=True, blank=True, related_name='subscription_orders')
    address = models.CharField(max_length=500)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    final_amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_type = models.CharField(max_length=10, choices=PAYMENT_CHOICES, default='ONLINE')
    start_date = models.DateField(null=True, blank=True)
    remaining_days = models.IntegerField(default=0)
    subscription_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscription_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='sub_orders_user_c5e210_idx'),
        ]

    def __str__(self):
        return f"Order #{self.pk} ({self.user_id})"


class DeliveryDate(models.Model):
    """One scheduled drop of a subscription order"""
    NON_DELIVERY_DAY = 'non delivery day'
    STATUS_CHOICES = [
        ('Scheduled', 'Scheduled'),
        ('order placed', 'Order placed'),
        ('pending', 'Pending'),
        ('in transit', 'In transit'),
        ('out-for-delivery', 'Out for delivery'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
        ('paused', 'Paused'),
        (NON_DELIVERY_DAY, 'Non delivery day'),
    ]

    order = models.ForeignKey(SubscriptionOrder, on_delete=models.CASCADE, related_name='delivery_dates')
    date = models.DateField()
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='pending')
    description = models.CharField(max_length=255, blank=True, default='')
    delivery_partner = models.ForeignKey(
        'delivery.DeliveryPartner', on_delete=models.SET_NULL, null=True, blank=True, related_name='deliveries'
    )
    delivery_time = models.CharField(max_length=20, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscription_delivery_dates'
        ordering = ['date', 'id']
        constraints = [
            models.UniqueConstraint(fields=['order', 'date'], name='unique_delivery_date_per_order'),
        ]

    def __str__(self):
        return f"Order #{self.order_id} on {self.date} ({self.status})"


class DailyTip(models.Model):
    AUDIENCE_CHOICES = [
        ('free', 'Free'),
        ('paid', 'Paid'),
    ]

    title = models.CharField(max_length=200)
    image_url = models.URLField(max_length=500, blank=True, default='')
    subscription = models.CharField(max_length=10, choices=AUDIENCE_CHOICES, default='free')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_tips'
        ordering = ['-created_at']

    def __str__(self):
        return self.title
