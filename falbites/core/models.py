from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from django.db import models


class User(AbstractUser):
    """Platform admin account; logs in with phone and password"""
    phone = models.CharField(max_length=15, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'phone'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'admin_users'

    def __str__(self):
        return f"{self.username} ({self.phone})"


class AuditLog(models.Model):
    """Audit log for money movements and destructive admin actions"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('login', 'Login'),
        ('wallet_credit', 'Wallet Credit'),
        ('payout', 'Payout'),
        ('block_toggle', 'Block Toggled'),
        ('status_change', 'Status Changed'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_7d1f3a_idx'),
            models.Index(fields=['action'], name='audit_logs_action_5c2e8b_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_9a4d21_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.model_name}#{self.object_id}"


class PlatformSetting(models.Model):
    """Single row of app-wide settings shown to customers; use ``PlatformSetting.load()``"""
    LINK_KEYS = ('website', 'about', 'privacy', 'termsAndConditions', 'thirdPartyLicense',
                 'refundAndCancelation', 'shippingPolicy')
    IMAGE_FIELDS = ('bottomImage', 'referImage', 'referPageImageAttachment', 'healthyBanner',
                    'searchBackgroundImage', 'topBannerImage')

    maintenance = models.BooleanField(default=False)
    links = models.JSONField(default=dict, blank=True)
    recharge_options = models.JSONField(default=list, blank=True)
    min_add_money = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    max_refers = models.PositiveIntegerField(default=0)
    refer_reward = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    delivery_timing = models.CharField(max_length=50, default='5:00 AM to 8:30 PM')
    max_subscription_update_or_cancel_time = models.CharField(max_length=10, default='8:30 PM')
    bottom_image = models.CharField(max_length=500, blank=True, default='')
    refer_image = models.CharField(max_length=500, blank=True, default='')
    refer_page_image_attachment = models.CharField(max_length=500, blank=True, default='')
    healthy_banner = models.CharField(max_length=500, blank=True, default='')
    search_background_image = models.CharField(max_length=500, blank=True, default='')
    top_banner_image = models.CharField(max_length=500, blank=True, default='')
    platform_fees = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'settings'

    def __str__(self):
        return 'Platform settings'

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        settings, _ = cls.objects.get_or_create(pk=1)
        return settings
