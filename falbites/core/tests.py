"""
Tests for admin authentication, response envelopes and shared helpers
"""
import tempfile
from datetime import date, datetime
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, RequestFactory, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser

from falbites.core.cache_utils import cached_list, CATEGORY_LIST_CACHE_KEY, SETTINGS_CACHE_KEY
from falbites.core.models import AuditLog, PlatformSetting
from falbites.core.pagination import paginate, positive_int
from falbites.core.parsers import request_payload
from falbites.core.responses import first_error
from falbites.core.stats import dashboard_stats, format_inr, percent_change, week_of_month, weeks_in_month
from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_png
from falbites.core.uploads import attach_image, storage_name
from falbites.core.utils import create_audit_log


class AdminAuthTests(TestCase):
    """Phone + password login and the admin endpoints behind it"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_user(username='root', phone='9000000001', password='secret123')

    def test_login_returns_token_and_user(self):
        """Test that login returns both tokens and the admin"""
        response = self.client.post('/api/v1/admin/login/', {'phone': '9000000001', 'password': 'secret123'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertIn('token', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'root')

    def test_login_wrong_password(self):
        """Test that a wrong password is a 401 envelope"""
        response = self.client.post('/api/v1/admin/login/', {'phone': '9000000001', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertIn('error', response.data)

    def test_protected_endpoint_without_token(self):
        """Test that protected endpoints need a token"""
        response = self.client.get('/api/v1/admin/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_me_for_admin(self):
        """Test the profile of an admin token"""
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/admin/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['kind'], 'admin')
        self.assertEqual(response.data['data']['phone'], '9000000001')

    def test_me_for_vendor(self):
        """Test the profile of a vendor token"""
        vendor = TestDataFactory.create_vendor(username='acme')
        self.client.authenticate_vendor(vendor)
        response = self.client.get('/api/v1/admin/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['kind'], 'vendor')
        self.assertEqual(response.data['data']['username'], 'acme')

    def test_register_requires_admin(self):
        """Test that only admins register admins"""
        payload = {'username': 'second', 'phone': '9000000002', 'password': 'secret123'}
        response = self.client.post('/api/v1/admin/register/', payload)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        vendor = TestDataFactory.create_vendor()
        self.client.authenticate_vendor(vendor)
        response = self.client.post('/api/v1/admin/register/', payload)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/admin/register/', payload)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['username'], 'second')

    def test_register_rejects_bad_phone(self):
        """Test that register validates the phone number"""
        self.client.authenticate_user(self.admin)
        response = self.client.post(
            '/api/v1/admin/register/', {'username': 'x', 'phone': '12ab', 'password': 'secret123'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('phone', response.data['errors'])

    def test_audit_log_list_filters_by_action(self):
        """Test filtering audit log entries by action"""
        create_audit_log(action='payout', model_name='DeliveryPartner', object_id=1)
        create_audit_log(action='delete', model_name='Vendor', object_id=2)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/', {'action': 'payout'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['model_name'], 'DeliveryPartner')


class AuditLogTests(TestCase):
    """Test audit log entries"""

    def test_missing_fields_skip_entry(self):
        """Test that incomplete entries are skipped"""
        self.assertIsNone(create_audit_log(action='delete', model_name=None, object_id=1))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_request_user_and_ip_recorded(self):
        """Test that the request's user and IP are recorded"""
        admin = TestDataFactory.create_user()
        request = RequestFactory().post('/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2')
        request.user = admin
        log = create_audit_log(request, 'delete', 'Vendor', 5, object_name='Acme')
        self.assertEqual(log.user, admin)
        self.assertEqual(log.ip_address, '10.0.0.1')
        self.assertEqual(log.object_id, '5')


class HelperTests(TestCase):
    """Test envelope, pagination, payload and cache helpers"""

    def test_first_error_prefixes_field(self):
        """Test that the first error is prefixed with its field"""
        self.assertEqual(first_error({'title': ['This field is required.']}), 'title: This field is required.')
        self.assertEqual(first_error({'non_field_errors': ['Bad']}), 'Bad')
        self.assertIsNone(first_error({}))

    def test_positive_int(self):
        """Test parsing positive integers with a fallback"""
        self.assertEqual(positive_int('5', 1), 5)
        self.assertEqual(positive_int('-2', 1), 1)
        self.assertEqual(positive_int('abc', 7), 7)

    def test_paginate_past_last_page(self):
        """Test paginating past the last page"""
        TestDataFactory.create_brand(title='A')
        TestDataFactory.create_brand(title='B')
        TestDataFactory.create_brand(title='C')
        from falbites.catalog.models import Brand
        items, meta = paginate(Brand.objects.all(), {'page': '2', 'limit': '2'})
        self.assertEqual([brand.title for brand in items], ['C'])
        self.assertEqual(meta, {'current': 2, 'pages': 2, 'total': 3})
        items, meta = paginate(Brand.objects.all(), {'page': '9', 'limit': '2'})
        self.assertEqual(items, [])

    def test_request_payload_decodes_json_fields(self):
        """Test decoding JSON encoded multipart fields"""
        factory = RequestFactory()
        django_request = factory.post('/', {'title': 'Plan', 'types': '[{"title": "Monthly"}]', 'franchiseIds': ''})
        request = Request(django_request, parsers=[JSONParser(), FormParser(), MultiPartParser()])
        payload = request_payload(request, json_fields=('types', 'franchiseIds'))
        self.assertEqual(payload['title'], 'Plan')
        self.assertEqual(payload['types'], [{'title': 'Monthly'}])
        self.assertEqual(payload['franchiseIds'], [])

    def test_request_payload_rejects_bad_json(self):
        """Test that malformed JSON fields are rejected"""
        django_request = RequestFactory().post('/', {'types': '[oops'})
        request = Request(django_request, parsers=[FormParser(), MultiPartParser()])
        with self.assertRaises(ValidationError):
            request_payload(request, json_fields=('types',))

    def test_storage_name_replaces_spaces(self):
        """Test that stored file names have no spaces"""
        self.assertTrue(storage_name('my photo.png').endswith('-my_photo.png'))

    def test_cached_list_builds_once(self):
        """Test that a cached value is built once"""
        cache.clear()
        calls = []

        def build():
            calls.append(1)
            return ['x']

        self.assertEqual(cached_list('test:list', build), ['x'])
        self.assertEqual(cached_list('test:list', build), ['x'])
        self.assertEqual(len(calls), 1)

    def test_category_cache_invalidated_on_save(self):
        """Test that saving a category drops the cached list"""
        cache.set(CATEGORY_LIST_CACHE_KEY, ['stale'])
        TestDataFactory.create_category()
        self.assertIsNone(cache.get(CATEGORY_LIST_CACHE_KEY))


@override_settings(MEDIA_ROOT=tempfile.mkdtemp(), SERVER_IMAGE_URL='http://img.test')
class UploadTests(TestCase):
    """Test image upload validation and storage"""

    def _request(self, files):
        django_request = RequestFactory().post('/', files)
        return Request(django_request, parsers=[FormParser(), MultiPartParser()])

    def test_attach_image_stores_file(self):
        """Test that an uploaded image is stored and its URL attached"""
        request = self._request({'image': make_png('logo.png')})
        payload = attach_image(request, {}, target='imageUrl')
        self.assertTrue(payload['imageUrl'].startswith('http://img.test/uploads/'))
        self.assertTrue(payload['imageUrl'].endswith('-logo.png'))

    def test_attach_image_keeps_existing_url(self):
        """Test that an already hosted URL is kept"""
        request = self._request({})
        payload = attach_image(request, {'image': 'http://cdn/x.png'}, required=True)
        self.assertEqual(payload['image'], 'http://cdn/x.png')

    def test_attach_image_required(self):
        """Test that a required image must be present"""
        request = self._request({})
        with self.assertRaises(ValidationError):
            attach_image(request, {}, required=True)

    def test_rejects_non_image_extension(self):
        """Test that non-image extensions are rejected"""
        from django.core.files.uploadedfile import SimpleUploadedFile
        request = self._request({'image': SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')})
        with self.assertRaises(ValidationError):
            attach_image(request, {})

    def test_rejects_corrupt_image(self):
        """Test that corrupt images are rejected"""
        from django.core.files.uploadedfile import SimpleUploadedFile
        request = self._request({'image': SimpleUploadedFile('fake.png', b'not an image', content_type='image/png')})
        with self.assertRaises(ValidationError):
            attach_image(request, {})


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class PlatformSettingTests(TestCase):
    """Test the app settings endpoint"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_user()

    def test_anyone_can_read_defaults(self):
        """Test that settings are created with defaults on first read and cached"""
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['maintenance'])
        self.assertEqual(response.data['data']['deliveryTiming'], '5:00 AM to 8:30 PM')
        self.assertEqual(response.data['data']['maxSubscriptionUpdateOrCancelTime'], '8:30 PM')
        self.assertEqual(response.data['data']['minAddMoney'], 1)
        self.assertEqual(PlatformSetting.objects.count(), 1)
        self.assertIsNotNone(cache.get(SETTINGS_CACHE_KEY))

    def test_patch_merges_links_and_refreshes_cache(self):
        """Test that links are merged key by key and the cached copy is dropped"""
        self.client.get('/api/v1/settings/')
        self.client.authenticate_user(self.admin)
        response = self.client.patch(
            '/api/v1/settings/', {'maintenance': True, 'links': {'privacy': 'http://falbites.in/privacy'}},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Settings updated successfully')
        self.client.patch('/api/v1/settings/', {'links': {'website': 'https://falbites.in'}}, format='json')

        response = self.client.get('/api/v1/settings/')
        self.assertTrue(response.data['data']['maintenance'])
        self.assertEqual(response.data['data']['links'], {
            'privacy': 'http://falbites.in/privacy',
            'website': 'https://falbites.in',
        })
        self.assertEqual(PlatformSetting.objects.count(), 1)

    def test_multipart_patch_with_image_and_recharge_options(self):
        """Test uploading one banner with JSON encoded recharge options"""
        self.client.authenticate_user(self.admin)
        response = self.client.patch(
            '/api/v1/settings/',
            {
                'topBannerImage': make_png('banner.png'),
                'rechargeOptions': '[{"amount": 500, "cashback": 25}, {"amount": 100}]',
                'maintenance': 'false',
                'platformFees': '4.50',
            },
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertTrue(data['topBannerImage'].endswith('-banner.png'))
        self.assertEqual(data['bottomImage'], '')
        self.assertEqual(data['rechargeOptions'], [{'amount': 500, 'cashback': 25}, {'amount': 100, 'cashback': 0}])
        self.assertEqual(PlatformSetting.load().platform_fees, Decimal('4.50'))

    def test_patch_validation(self):
        """Test that bad links, recharge options and minimums are rejected"""
        self.client.authenticate_user(self.admin)
        response = self.client.patch('/api/v1/settings/', {'links': {'website': 'falbites.in'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('links', response.data['errors'])
        response = self.client.patch('/api/v1/settings/', {'links': {'blog': 'http://x'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch('/api/v1/settings/', {'rechargeOptions': [{'amount': 0}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rechargeOptions', response.data['errors'])
        response = self.client.patch('/api/v1/settings/', {'minAddMoney': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PlatformSetting.load().links, {})

    def test_only_admins_write(self):
        """Test that anonymous callers and vendors cannot patch settings"""
        response = self.client.patch('/api/v1/settings/', {'maintenance': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.patch('/api/v1/settings/', {'maintenance': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(PlatformSetting.load().maintenance)


def at(year, month, day):
    return timezone.make_aware(datetime(year, month, day, 10, 0))


class DashboardStatsTests(TestCase):
    """Test the dashboard home figures"""

    def setUp(self):
        self.franchise = TestDataFactory.create_franchise()
        # March 2026 and February 2026 both start on a Sunday
        orders = [
            (TestDataFactory.create_subscription_order(), Decimal('1000.00'), at(2026, 3, 15)),
            (TestDataFactory.create_subscription_order(status='Cancelled'), Decimal('500.00'), at(2026, 2, 10)),
            (TestDataFactory.create_subscription_order(franchise=self.franchise), Decimal('200.00'), at(2026, 3, 2)),
        ]
        for order, amount, created in orders:
            type(order).objects.filter(pk=order.pk).update(final_amount=amount, created_at=created)
        self.customers = [order.user for order, _, _ in orders]
        type(self.customers[0]).objects.update(created_at=at(2026, 3, 5))

    def test_helpers(self):
        """Test percentage change, rupee formatting and Sunday based weeks"""
        self.assertEqual(percent_change(0, 0), '0%')
        self.assertEqual(percent_change(5, 0), '100%')
        self.assertEqual(percent_change(1, 2), '-50.0%')
        self.assertEqual(format_inr(Decimal('1234567')), '₹12,34,567')
        self.assertEqual(format_inr(Decimal('999.50')), '₹999.5')
        self.assertEqual(week_of_month(date(2026, 3, 7)), 1)
        self.assertEqual(week_of_month(date(2026, 3, 8)), 2)
        self.assertEqual(week_of_month(date(2026, 4, 5)), 2)
        self.assertEqual(weeks_in_month(date(2026, 3, 1)), 5)

    def test_stats_for_all_branches(self):
        """Test the cards, monthly sales, status split and weekly revenue"""
        stats = dashboard_stats(today=date(2026, 3, 20))
        cards = {card['title']: card for card in stats['stats']}
        self.assertEqual(cards['Total Sales']['value'], '₹1,700')
        self.assertEqual(cards['Total Sales']['change'], '240.0% from last month')
        self.assertEqual(cards['Orders']['value'], '2')
        self.assertEqual(cards['Orders']['change'], '100.0% from last month')
        self.assertEqual(cards['New Customers']['value'], '3')
        self.assertEqual(cards['Active Subscriptions']['change'], '100% from last month')
        self.assertEqual(cards['Products']['change'], 'No new products')

        self.assertEqual(len(stats['salesData']), 12)
        self.assertEqual(stats['salesData'][1], {'month': 'Feb', 'sales': 500.0})
        self.assertEqual(stats['salesData'][2], {'month': 'Mar', 'sales': 1200.0})
        self.assertEqual(
            [(row['name'], row['value']) for row in stats['orderData']],
            [('Active', 2), ('Inactive', 0), ('Cancelled', 0)]
        )
        revenue = stats['revenueData']
        self.assertEqual([row['week'] for row in revenue], ['Week 1', 'Week 2', 'Week 3', 'Week 4', 'Week 5'])
        self.assertEqual(revenue[0]['revenue'], 200.0)
        self.assertEqual(revenue[1]['change'], '-100.0% from last month')
        self.assertEqual(revenue[2]['revenue'], 1000.0)

    def test_stats_for_one_branch(self):
        """Test that branchId limits the order figures to one franchise"""
        stats = dashboard_stats(branch_id=self.franchise.pk, today=date(2026, 3, 20))
        cards = {card['title']: card for card in stats['stats']}
        self.assertEqual(cards['Total Sales']['value'], '₹200')
        self.assertEqual(cards['Orders']['value'], '1')

    def test_endpoint(self):
        """Test the endpoint envelope, branchId validation and admin guard"""
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(len(response.data['stats']), 6)
        self.assertEqual(len(response.data['salesData']), 12)
        self.assertIn('revenueData', response.data)
        response = client.get('/api/v1/dashboard/stats/', {'branchId': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        client.authenticate_vendor(TestDataFactory.create_vendor())
        response = client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
