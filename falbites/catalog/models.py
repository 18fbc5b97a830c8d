from django.db import models
from django.utils import timezone


class Category(models.Model):
    """Top level of the three-tier category tree"""
    title = models.CharField(max_length=100, unique=True)
    image = models.URLField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        ordering = ['title']
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.title


class TopCategory(models.Model):
    title = models.CharField(max_length=100)
    image = models.URLField(max_length=500, blank=True, default='')
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='top_categories')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'top_categories'
        ordering = ['title']
        verbose_name_plural = 'Top categories'

    def __str__(self):
        return f"{self.category.title} / {self.title}"


class SubCategory(models.Model):
    title = models.CharField(max_length=100)
    image = models.URLField(max_length=500, blank=True, default='')
    top_category = models.ForeignKey(TopCategory, on_delete=models.CASCADE, related_name='sub_categories')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sub_categories'
        ordering = ['title']
        verbose_name_plural = 'Sub categories'

    def __str__(self):
        return self.title


class Brand(models.Model):
    title = models.CharField(max_length=100, unique=True)
    image = models.URLField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'brands'
        ordering = ['title']

    def __str__(self):
        return self.title


class Product(models.Model):
    """Catalog product; vendor submissions wait in pending until reviewed"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('success', 'Approved'),
        ('failed', 'Rejected'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    top_category = models.ForeignKey(TopCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    sub_category = models.ForeignKey(SubCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    brand = models.ForeignKey(Brand, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    weight_or_count = models.CharField(max_length=100, blank=True, default='')
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='success')
    creator = models.ForeignKey('vendors.Vendor', on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='products_status_3b8e1c_idx'),
            models.Index(fields=['-created_at'], name='products_created_a41f07_idx'),
        ]

    def __str__(self):
        return self.title


class ProductType(models.Model):
    """Purchasable variant of a product (size, pack, weight...)"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='types')
    title = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    without_discount_price = models.DecimalField(max_digits=10, decimal_places=2)
    small_description = models.CharField(max_length=200, blank=True, default='')
    image_url = models.URLField(max_length=500, blank=True, default='')
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'product_types'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.product.title} - {self.title}"


class CategoryChoice(models.Model):
    """Home screen shortcut pointing at a product or at a subscription category"""
    TYPE_CHOICES = [
        ('product', 'Product'),
        ('subscription', 'Subscription'),
    ]

    title = models.CharField(max_length=100, unique=True)
    image = models.URLField(max_length=500, blank=True, default='')
    types = models.CharField(max_length=20, choices=TYPE_CHOICES, default='product')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='choices')
    category = models.CharField(max_length=100, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'category_choices'
        ordering = ['title']

    def __str__(self):
        return self.title


class ProductOrder(models.Model):
    """One-off order of a product variant"""
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Delivered', 'Delivered'),
        ('Failed', 'Failed'),
        ('Delayed', 'Delayed'),
        ('Cancelled', 'Cancelled'),
    ]

    user = models.ForeignKey(
        'users.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='product_orders'
    )
    delivery_partner = models.ForeignKey(
        'delivery.DeliveryPartner', on_delete=models.SET_NULL, null=True, blank=True, related_name='product_orders'
    )
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    selected_type = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(default=1)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    delivery_date = models.DateField(null=True, blank=True)
    order_date = models.DateTimeField(default=timezone.now)
    payment_method = models.CharField(max_length=50, default='Cash on Delivery')
    address = models.TextField()
    franchise = models.ForeignKey(
        'franchises.Franchise', on_delete=models.SET_NULL, null=True, blank=True, related_name='product_orders'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'product_orders'
        ordering = ['-order_date', '-id']

    def __str__(self):
        return f"Product order #{self.pk} ({self.status})"
