from django.core.validators import RegexValidator
from django.db import models

mobile_number_validator = RegexValidator(r'^\d{10}$', 'Mobile number must be exactly 10 digits')


class Customer(models.Model):
    """App user; managers are customers with the manager role"""
    ROLE_CHOICES = [
        ('user', 'User'),
        ('manager', 'Manager'),
    ]

    name = models.CharField(max_length=20, blank=True, default='')
    mobile_number = models.CharField(max_length=10, unique=True, validators=[mobile_number_validator])
    email = models.EmailField(blank=True, default='')
    wallet = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    refer_code = models.CharField(max_length=16, unique=True, blank=True, null=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='user')
    blocked = models.BooleanField(default=False)
    assigned_franchise = models.ForeignKey(
        'franchises.Franchise', on_delete=models.SET_NULL, null=True, blank=True, related_name='customers'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name or 'Customer'} ({self.mobile_number})"


class WalletTransaction(models.Model):
    TYPE_CHOICES = [
        ('credit', 'Credit'),
        ('debit', 'Debit'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='wallet_transactions')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    title = models.CharField(max_length=100, default='Balance Added')
    reason = models.CharField(max_length=200, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'wallet_transactions'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} {self.amount} for {self.customer_id}"
