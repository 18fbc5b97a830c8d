"""
Tests for subscriptions, subscription orders and daily tips
"""
import json
import tempfile
from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from falbites.core.cache_utils import DAILY_TIPS_CACHE_KEY
from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_png
from falbites.subscriptions.models import Subscription, SubscriptionOrder, DailyTip


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class SubscriptionAPITests(TestCase):
    """Test subscription plan endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.franchise = TestDataFactory.create_franchise()

    def multipart_payload(self, **overrides):
        data = {
            'title': 'Fruit Box',
            'description': 'Seasonal fruit every morning',
            'category': 'Fruits',
            'weightOrCount': '500 g',
            'types': json.dumps([{'title': 'Monthly', 'price': '999', 'withoutDiscountPrice': '1199'}]),
            'franchiseIds': json.dumps([self.franchise.pk]),
        }
        data.update(overrides)
        return data

    def test_create_orders_main_image_first(self):
        """Test that the chosen main image is stored first"""
        payload = self.multipart_payload(images=[make_png('a.png'), make_png('b.png')], mainImageIndex='1')
        response = self.client.post('/api/v1/subscriptions/', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        created = response.data['data'][0]
        self.assertEqual(len(created['imageUrl']), 2)
        self.assertTrue(created['imageUrl'][0].endswith('-b.png'))
        self.assertEqual(created['franchiseIds'], [self.franchise.pk])
        self.assertEqual(created['types'][0]['title'], 'Monthly')

    def test_create_requires_images(self):
        """Test that creating without images is rejected"""
        response = self.client.post('/api/v1/subscriptions/', self.multipart_payload(), format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('images', response.data['errors'])
        self.assertFalse(Subscription.objects.exists())

    def test_create_rejects_bad_main_index(self):
        """Test that an out of range main image index is rejected"""
        payload = self.multipart_payload(images=[make_png('a.png')], mainImageIndex='3')
        response = self.client.post('/api/v1/subscriptions/', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['mainImageIndex'], 'Invalid mainImageIndex')

    def test_detail_get_is_bare_object(self):
        """Test that the detail GET returns the bare subscription"""
        subscription = TestDataFactory.create_subscription(title='Veg Box')
        response = self.client.get(f'/api/v1/subscriptions/{subscription.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Veg Box')
        self.assertNotIn('success', response.data)

    def test_update_returns_single_element_list(self):
        """Test that an update answers with a one-element list"""
        subscription = TestDataFactory.create_subscription()
        response = self.client.patch(
            f'/api/v1/subscriptions/{subscription.pk}/', {'title': 'Renamed'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['title'], 'Renamed')
        self.assertEqual(len(response.data['data'][0]['types']), 1)

    def test_search(self):
        """Test search by title or description with an optional category"""
        TestDataFactory.create_subscription(
            title='Fruit Box', category='Fruits', description='Seasonal fruit every morning'
        )
        TestDataFactory.create_subscription(title='Fruit Juice', category='Drinks', description='Cold pressed juice')
        TestDataFactory.create_subscription(title='Milk', category='Dairy', description='Toned milk every morning')
        response = self.client.get('/api/v1/subscriptions/search/', {'q': 'fruit'})
        self.assertEqual(sorted(row['title'] for row in response.data['data']), ['Fruit Box', 'Fruit Juice'])
        response = self.client.get('/api/v1/subscriptions/search/', {'q': 'fruit', 'category': 'Drinks'})
        self.assertEqual([row['title'] for row in response.data['data']], ['Fruit Juice'])
        response = self.client.get('/api/v1/subscriptions/search/', {'q': 'PRESSED'})
        self.assertEqual([row['title'] for row in response.data['data']], ['Fruit Juice'])
        response = self.client.get('/api/v1/subscriptions/search/', {'q': 'every morning'})
        self.assertEqual(sorted(row['title'] for row in response.data['data']), ['Fruit Box', 'Milk'])

    def test_delete_and_not_found(self):
        """Test deleting a subscription and reading it afterwards"""
        subscription = TestDataFactory.create_subscription()
        response = self.client.delete(f'/api/v1/subscriptions/{subscription.pk}/')
        self.assertEqual(response.data['message'], 'Subscription deleted successfully')
        response = self.client.get(f'/api/v1/subscriptions/{subscription.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Subscription not found')


class SubscriptionOrderAPITests(TestCase):
    """Test subscription order endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_filters(self):
        """Test filtering orders by user and status"""
        user = TestDataFactory.create_customer(name='Asha')
        TestDataFactory.create_subscription_order(user=user)
        TestDataFactory.create_subscription_order(status='Cancelled')

        response = self.client.get('/api/v1/subscription-orders/', {'userId': user.pk})
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['userID']['name'], 'Asha')

        response = self.client.get('/api/v1/subscription-orders/', {'status': 'Cancelled'})
        self.assertEqual(len(response.data['data']), 1)

    def test_list_rejects_malformed_filters(self):
        """Test that a non-numeric userId or unknown status is a 400, not the full list"""
        TestDataFactory.create_subscription_order()
        response = self.client.get('/api/v1/subscription-orders/', {'userId': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('userId', response.data['errors'])
        response = self.client.get('/api/v1/subscription-orders/', {'status': 'Paused'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])

    def test_order_lists_delivery_dates(self):
        """Test that an order carries its scheduled deliveries in date order"""
        order = TestDataFactory.create_subscription_order()
        partner = TestDataFactory.create_delivery_partner(first_name='Sunil')
        today = timezone.localdate()
        TestDataFactory.create_delivery_date(order=order, date=today + timedelta(days=1))
        TestDataFactory.create_delivery_date(order=order, date=today, status='delivered', partner=partner)
        response = self.client.get(f'/api/v1/subscription-orders/{order.pk}/')
        deliveries = response.data['data']['deliveryDates']
        self.assertEqual([row['status'] for row in deliveries], ['delivered', 'pending'])
        self.assertEqual(deliveries[0]['deliveryPartner']['firstName'], 'Sunil')
        self.assertIsNone(deliveries[1]['deliveryPartner'])


class DeliveryStatusAPITests(TestCase):
    """Test changing the status of one scheduled delivery"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.order = TestDataFactory.create_subscription_order()
        self.delivery = TestDataFactory.create_delivery_date(order=self.order)

    def url(self, order_id=None):
        return f'/api/v1/subscription-orders/{order_id or self.order.pk}/delivery-status/'

    def test_update_status(self):
        """Test that the delivery is updated and the whole order comes back"""
        response = self.client.patch(
            self.url(), {'deliveryId': self.delivery.pk, 'status': 'out-for-delivery'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Delivery status updated successfully')
        self.assertEqual(response.data['data']['_id'], self.order.pk)
        self.assertEqual(response.data['data']['deliveryDates'][0]['status'], 'out-for-delivery')
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.status, 'out-for-delivery')

    def test_unknown_status_is_rejected(self):
        """Test that a status outside the delivery statuses is a 400"""
        response = self.client.patch(self.url(), {'deliveryId': self.delivery.pk, 'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])
        self.delivery.refresh_from_db()
        self.assertEqual(self.delivery.status, 'pending')

    def test_delivery_of_another_order(self):
        """Test that a delivery id from a different order is not found"""
        other = TestDataFactory.create_delivery_date()
        response = self.client.patch(self.url(), {'deliveryId': other.pk, 'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Delivery date not found')
        other.refresh_from_db()
        self.assertEqual(other.status, 'pending')

    def test_missing_order(self):
        """Test that an unknown order is a 404"""
        response = self.client.patch(
            self.url(self.order.pk + 100), {'deliveryId': self.delivery.pk, 'status': 'delivered'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Order not found')

    def test_non_delivery_day_is_locked(self):
        """Test that a non delivery day keeps its status"""
        locked = TestDataFactory.create_delivery_date(
            order=self.order, date=timezone.localdate() + timedelta(days=1), status='non delivery day'
        )
        response = self.client.patch(self.url(), {'deliveryId': locked.pk, 'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        locked.refresh_from_db()
        self.assertEqual(locked.status, 'non delivery day')

    def test_patch_status_only_changes_allowed_fields(self):
        """Test that PATCH ignores read-only order fields"""
        order = TestDataFactory.create_subscription_order()
        response = self.client.patch(
            f'/api/v1/subscription-orders/{order.pk}/',
            {'subscriptionStatus': 'Inactive', 'remainingDays': 5, 'address': 'Elsewhere'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Order updated successfully')
        order.refresh_from_db()
        self.assertEqual(order.subscription_status, 'Inactive')
        self.assertEqual(order.remaining_days, 5)
        self.assertEqual(order.address, '12 MG Road, Pune')

    def test_patch_rejects_unknown_status(self):
        """Test that an unknown subscription status is rejected"""
        order = TestDataFactory.create_subscription_order()
        response = self.client.patch(
            f'/api/v1/subscription-orders/{order.pk}/', {'subscriptionStatus': 'Paused'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_and_missing(self):
        """Test deleting an order and reading it afterwards"""
        order = TestDataFactory.create_subscription_order()
        response = self.client.delete(f'/api/v1/subscription-orders/{order.pk}/')
        self.assertEqual(response.data['message'], 'Order deleted successfully')
        self.assertFalse(SubscriptionOrder.objects.exists())
        response = self.client.get(f'/api/v1/subscription-orders/{order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Order not found')


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class DailyTipAPITests(TestCase):
    """Test daily tip endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_with_image(self):
        """Test creating a daily tip with an uploaded image"""
        response = self.client.post(
            '/api/v1/dailytips/', {'title': 'Eat a banana', 'subscription': 'paid', 'image': make_png('tip.png')},
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['imageUrl'].endswith('-tip.png'))
        self.assertEqual(response.data['data']['subscription'], 'paid')

    def test_list_cache_refreshes_after_write(self):
        """Test that the cached tip list is dropped on every write"""
        TestDataFactory.create_daily_tip(title='First')
        response = self.client.get('/api/v1/dailytips/')
        self.assertEqual(len(response.data['data']), 1)
        self.assertIsNotNone(cache.get(DAILY_TIPS_CACHE_KEY))

        tip = TestDataFactory.create_daily_tip(title='Second')
        response = self.client.get('/api/v1/dailytips/')
        self.assertEqual(len(response.data['data']), 2)

        self.client.delete(f'/api/v1/dailytips/{tip.pk}/')
        response = self.client.get('/api/v1/dailytips/')
        self.assertEqual(len(response.data['data']), 1)

    def test_patch_and_missing(self):
        """Test patching a tip and reading a missing one"""
        tip = TestDataFactory.create_daily_tip()
        response = self.client.patch(f'/api/v1/dailytips/{tip.pk}/', {'title': 'Drink water'}, format='multipart')
        self.assertEqual(response.data['data']['title'], 'Drink water')
        DailyTip.objects.all().delete()
        response = self.client.get(f'/api/v1/dailytips/{tip.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Tip not found')
