"""
Test utilities and factories for creating test data
"""
import io
import random
import string
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from PIL import Image
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from falbites.catalog.models import (
    Brand, Category, CategoryChoice, Product, ProductOrder, ProductType, SubCategory, TopCategory
)
from falbites.core.authentication import vendor_access_token
from falbites.delivery.models import Attendance, BoxReview, BulkDelivery, DeliveryPartner, UnavailableLocation
from falbites.franchises.models import Franchise
from falbites.reviews.models import Review
from falbites.subscriptions.models import DailyTip, DeliveryDate, Subscription, SubscriptionOrder, SubscriptionType
from falbites.users.models import Customer
from falbites.vendors.models import Vendor

User = get_user_model()


def make_png(name='image.png', size=(8, 8), color=(200, 30, 30)):
    """Small in-memory PNG upload"""
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_mobile(first='9'):
        return f'{first}{random.randint(100000000, 999999999)}'

    @staticmethod
    def create_user(username=None, phone=None, password='testpass123', is_staff=True, is_superuser=False):
        """Create an admin account"""
        if not username:
            username = f'admin_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = TestDataFactory.random_mobile()
        return User.objects.create_user(
            phone=phone,
            username=username,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_customer(name=None, mobile_number=None, role='user', wallet=Decimal('0.00'), blocked=False):
        """Create an app customer"""
        return Customer.objects.create(
            name=name if name is not None else f'Cust_{TestDataFactory.random_string(4)}',
            mobile_number=mobile_number or TestDataFactory.random_mobile(),
            role=role,
            wallet=wallet,
            blocked=blocked
        )

    @staticmethod
    def create_manager(name=None, mobile_number=None):
        return TestDataFactory.create_customer(name=name, mobile_number=mobile_number, role='manager')

    @staticmethod
    def create_vendor(name=None, username=None, password='vendorpass1', brand_name=None):
        """Create a vendor with a hashed password"""
        if not username:
            username = f'vendor_{TestDataFactory.random_string(6).lower()}'
        vendor = Vendor(
            name=name or f'Vendor {username}',
            username=username,
            brand_name=brand_name or f'Brand {username}'
        )
        vendor.set_password(password)
        vendor.save()
        return vendor

    @staticmethod
    def create_franchise(name=None, city_name='Pune', branch_name='Kothrud', manager=None):
        """Create a franchise"""
        return Franchise.objects.create(
            name=name or f'Franchise_{TestDataFactory.random_string(6)}',
            city_name=city_name,
            branch_name=branch_name,
            location_name='Main Road',
            latitude=18.5074,
            longitude=73.8077,
            total_delivery_radius=10,
            free_delivery_radius=3,
            charge_per_extra_km=5,
            assigned_manager=manager
        )

    @staticmethod
    def create_category(title=None):
        return Category.objects.create(
            title=title or f'Category_{TestDataFactory.random_string(6)}',
            image='http://localhost:8000/uploads/category.png'
        )

    @staticmethod
    def create_top_category(category=None, title=None):
        return TopCategory.objects.create(
            title=title or f'Top_{TestDataFactory.random_string(6)}',
            category=category or TestDataFactory.create_category()
        )

    @staticmethod
    def create_sub_category(top_category=None, title=None):
        return SubCategory.objects.create(
            title=title or f'Sub_{TestDataFactory.random_string(6)}',
            top_category=top_category or TestDataFactory.create_top_category()
        )

    @staticmethod
    def create_brand(title=None):
        return Brand.objects.create(
            title=title or f'Brand_{TestDataFactory.random_string(6)}',
            image='http://localhost:8000/uploads/brand.png'
        )

    @staticmethod
    def create_product(title=None, category=None, status='success', creator=None, price=Decimal('50.00')):
        """Create a product with one type"""
        product = Product.objects.create(
            title=title or f'Product_{TestDataFactory.random_string(6)}',
            description='Fresh and tasty',
            category=category or TestDataFactory.create_category(),
            weight_or_count='1 kg',
            status=status,
            creator=creator
        )
        ProductType.objects.create(
            product=product,
            title='Regular',
            price=price,
            without_discount_price=price + Decimal('10.00')
        )
        return product

    @staticmethod
    def create_subscription(title=None, category='Fruits', franchises=(), description='Daily fruit box'):
        """Create a subscription with one type"""
        subscription = Subscription.objects.create(
            title=title or f'Plan_{TestDataFactory.random_string(6)}',
            description=description,
            category=category,
            weight_or_count='500 g',
            image_urls=['http://localhost:8000/uploads/main.png']
        )
        SubscriptionType.objects.create(
            subscription=subscription,
            title='Monthly',
            price=Decimal('999.00'),
            without_discount_price=Decimal('1199.00')
        )
        if franchises:
            subscription.franchises.set(franchises)
        return subscription

    @staticmethod
    def create_subscription_order(user=None, subscription=None, franchise=None, status='Active'):
        return SubscriptionOrder.objects.create(
            user=user or TestDataFactory.create_customer(),
            subscription=subscription or TestDataFactory.create_subscription(),
            franchise=franchise,
            address='12 MG Road, Pune',
            total_amount=Decimal('999.00'),
            final_amount=Decimal('999.00'),
            payment_type='ONLINE',
            start_date=timezone.now().date(),
            remaining_days=30,
            subscription_status=status
        )

    @staticmethod
    def create_daily_tip(title=None, audience='free'):
        return DailyTip.objects.create(
            title=title or f'Tip_{TestDataFactory.random_string(6)}',
            image_url='http://localhost:8000/uploads/tip.png',
            subscription=audience
        )

    @staticmethod
    def create_delivery_partner(first_name='Ravi', last_name='Kumar', wallet=Decimal('0.00'),
                                onboarding_status='pending', branch=None):
        """Create a delivery partner"""
        return DeliveryPartner.objects.create(
            first_name=first_name,
            last_name=last_name,
            mobile_number=TestDataFactory.random_mobile('8'),
            vehicle_type='Bike',
            city='Pune',
            branch='Kothrud',
            wallet=wallet,
            onboarding_status=onboarding_status,
            assigned_branch=branch
        )

    @staticmethod
    def create_box_review(order=None, partner=None, remark='Box returned'):
        return BoxReview.objects.create(
            order=order or TestDataFactory.create_subscription_order(),
            partner=partner or TestDataFactory.create_delivery_partner(),
            box_image='http://localhost:8000/uploads/box.png',
            remark=remark,
            is_box_picked=True
        )

    @staticmethod
    def create_bulk_delivery(name=None, status='pending'):
        return BulkDelivery.objects.create(
            name=name or f'Bulk_{TestDataFactory.random_string(6)}',
            address='Hinjewadi Phase 1',
            phone_number='9876543210',
            delivery_date=timezone.now().date(),
            image_url='http://localhost:8000/uploads/bulk.png',
            status=status
        )

    @staticmethod
    def create_unavailable_location(city='Pune', area='Wagholi', pin_code='412207', added_by=None):
        return UnavailableLocation.objects.create(
            city=city,
            area=area,
            pin_code=pin_code,
            added_by=added_by or TestDataFactory.create_customer()
        )

    @staticmethod
    def create_review(partner=None, subscription=None, user=None, franchise=None, rating=5, date=None,
                      description='Great service'):
        """Create a review; ``date`` defaults to now"""
        review = Review.objects.create(
            description=description,
            rating=rating,
            delivery_partner=partner or TestDataFactory.create_delivery_partner(),
            subscription=subscription or TestDataFactory.create_subscription(),
            user=user or TestDataFactory.create_customer(),
            franchise=franchise
        )
        if date is not None:
            Review.objects.filter(pk=review.pk).update(date=date)
            review.refresh_from_db()
        return review

    @staticmethod
    def create_delivery_date(order=None, date=None, status='pending', partner=None):
        return DeliveryDate.objects.create(
            order=order or TestDataFactory.create_subscription_order(),
            date=date or timezone.localdate(),
            status=status,
            delivery_partner=partner
        )

    @staticmethod
    def create_attendance(partner=None, date=None, status='pending'):
        return Attendance.objects.create(
            partner=partner or TestDataFactory.create_delivery_partner(),
            date=date or timezone.localdate(),
            status=status
        )

    @staticmethod
    def create_category_choice(title=None, types='product', product=None, category=''):
        if types == 'product' and product is None:
            product = TestDataFactory.create_product()
        return CategoryChoice.objects.create(
            title=title or f'Choice_{TestDataFactory.random_string(6)}',
            image='http://localhost:8000/uploads/choice.png',
            types=types,
            product=product,
            category=category
        )

    @staticmethod
    def create_product_order(product=None, user=None, status='Pending', total_price=Decimal('100.00')):
        """Create an order for one unit of a product's first type"""
        product = product or TestDataFactory.create_product()
        return ProductOrder.objects.create(
            user=user or TestDataFactory.create_customer(),
            product=product,
            selected_type='Regular',
            quantity=1,
            total_price=total_price,
            status=status,
            address='12 MG Road, Pune'
        )


def admin_token(user):
    return str(RefreshToken.for_user(user).access_token)


def vendor_token(vendor):
    return str(vendor_access_token(vendor))


class AuthenticatedAPIClient(APIClient):
    """API client with authentication helpers"""

    def authenticate_user(self, user):
        """Authenticate an admin account with a JWT"""
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {admin_token(user)}')

    def authenticate_vendor(self, vendor):
        """Authenticate with a vendor token"""
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {vendor_token(vendor)}')

    def logout(self):
        """Clear authentication"""
        self.credentials()
