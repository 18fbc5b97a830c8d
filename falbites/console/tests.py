"""
Tests for the dashboard console: response envelopes, sessions, the page
controllers (driven against the real API in-process) and the dashboard command
"""
import io
import json
import os
import tempfile
from datetime import timedelta
from decimal import Decimal
from unittest import mock

import requests
from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import RequestsClient

from falbites.catalog.models import CategoryChoice, ProductOrder, ProductType
from falbites.console.api import ApiClient, ApiError, NETWORK_ERROR_MESSAGE, RequestCancelled
from falbites.console.envelope import parse_envelope
from falbites.console.forms import Payload, ProductForm, SubscriptionForm, VendorForm
from falbites.console.pages import (
    AdminLoginPage, AttendancePage, BrandPage, CategoryChoicePage, DashboardPage, FranchisePage, OrderDeliveryPage,
    PartnerVerificationPage, PayoutPage, ProductOrderPage, ProductPage, ReviewPage, SettingsPage, SubscriptionPage,
    UserPage, VendorPage, VendorProductPage
)
from falbites.console.session import ADMIN, VENDOR, Session, SessionError
from falbites.console.shell import Shell, UnknownRoute
from falbites.console.storage import LocalStorage
from falbites.console.tables import render_table
from falbites.console.tasks import CancelToken, Debouncer
from falbites.core.models import PlatformSetting
from falbites.core.test_utils import TestDataFactory, admin_token, make_png
from falbites.delivery.models import DeliveryPartner
from falbites.reviews.models import Review
from falbites.subscriptions.models import DeliveryDate, Subscription
from falbites.vendors.models import Vendor

API_URL = 'http://testserver/api/v1/'


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def temp_storage():
    return LocalStorage(os.path.join(tempfile.mkdtemp(), 'storage.json'))


class EnvelopeTests(SimpleTestCase):
    """Test normalizing API response bodies"""

    def test_success_with_data(self):
        """Test a success envelope with a data payload"""
        envelope = parse_envelope({'success': True, 'message': 'Vendor created', 'data': {'_id': 1}}, 201)
        self.assertTrue(envelope.ok)
        self.assertEqual(envelope.record, {'_id': 1})
        self.assertEqual(envelope.items, [{'_id': 1}])
        self.assertEqual(envelope.message, 'Vendor created')

    def test_bare_array(self):
        """Test a bare array body"""
        envelope = parse_envelope([{'_id': 1}, {'_id': 2}])
        self.assertTrue(envelope.ok)
        self.assertEqual(len(envelope.items), 2)

    def test_bare_object(self):
        """Test a bare object body"""
        envelope = parse_envelope({'_id': 3, 'title': 'Fruit Box'})
        self.assertEqual(envelope.record['title'], 'Fruit Box')
        self.assertEqual(envelope.extra, {})

    def test_data_without_success_flag(self):
        """Test a data payload without a success flag"""
        envelope = parse_envelope({'message': 'Franchise updated successfully', 'data': {'_id': 4}})
        self.assertTrue(envelope.ok)
        self.assertEqual(envelope.record['_id'], 4)

    def test_named_payload_keys(self):
        """Test named payload keys and an explicit key"""
        envelope = parse_envelope({'success': True, 'reviews': [{'_id': 1}]})
        self.assertEqual(envelope.items, [{'_id': 1}])
        envelope = parse_envelope({'success': True, 'location': {'_id': 2}}, key='locations')
        self.assertEqual(envelope.record, {'_id': 2})

    def test_extra_keys_and_pagination(self):
        """Test that unknown keys land in extra and pagination is kept"""
        envelope = parse_envelope({
            'success': True, 'token': 'abc', 'refresh': 'def', 'user': {'_id': 1},
        })
        self.assertEqual(envelope.record, {'_id': 1})
        self.assertEqual(envelope.extra, {'token': 'abc', 'refresh': 'def'})

        envelope = parse_envelope({'success': True, 'data': [], 'pagination': {'current': 1, 'pages': 0, 'total': 0}})
        self.assertEqual(envelope.pagination['total'], 0)

    def test_failures(self):
        """Test failure bodies, field errors and empty bodies"""
        envelope = parse_envelope({'success': False, 'message': 'Review not found'}, 404)
        self.assertFalse(envelope.ok)
        self.assertEqual(envelope.message, 'Review not found')

        envelope = parse_envelope({'success': False, 'error': 'title: required', 'errors': {'title': ['required']}}, 400)
        self.assertEqual(envelope.errors, {'title': ['required']})

        envelope = parse_envelope({'success': False, 'data': None}, 200)
        self.assertFalse(envelope.ok)

        envelope = parse_envelope(None, 502)
        self.assertFalse(envelope.ok)
        self.assertIsNone(envelope.message)


class DebouncerTests(SimpleTestCase):
    """Test the search debouncer"""

    def test_only_last_call_runs_after_delay(self):
        """Test that only the last scheduled call runs once the delay passes"""
        clock = FakeClock()
        calls = []
        debouncer = Debouncer(0.3, clock)

        debouncer.schedule(calls.append, 'a')
        clock.advance(0.2)
        debouncer.schedule(calls.append, 'ap')
        clock.advance(0.2)
        self.assertFalse(debouncer.tick())
        self.assertTrue(debouncer.pending)

        clock.advance(0.2)
        self.assertTrue(debouncer.tick())
        self.assertEqual(calls, ['ap'])
        self.assertFalse(debouncer.pending)
        self.assertFalse(debouncer.tick())

    def test_cancel(self):
        """Test that a cancelled call never runs"""
        calls = []
        debouncer = Debouncer(0.3, FakeClock())
        debouncer.schedule(calls.append, 'x')
        debouncer.cancel()
        self.assertIsNone(debouncer.flush())
        self.assertEqual(calls, [])


@override_settings(FALBITES_API_TIMEOUT=5)
class ApiClientTests(SimpleTestCase):
    """Test the API client"""

    def test_cancelled_token_skips_request(self):
        """Test that a cancelled token skips the request"""
        session = mock.Mock()
        client = ApiClient(base_url=API_URL, session=session)
        token = CancelToken()
        token.cancel()
        with self.assertRaises(RequestCancelled):
            client.get('vendors/', cancel_token=token)
        session.request.assert_not_called()

    def test_network_failure(self):
        """Test that a connection error becomes the network error message"""
        session = mock.Mock()
        session.request.side_effect = requests.ConnectionError('refused')
        client = ApiClient(base_url=API_URL, session=session)
        with self.assertRaises(ApiError) as ctx:
            client.get('vendors/')
        self.assertEqual(ctx.exception.message, NETWORK_ERROR_MESSAGE)

    def test_bearer_token_and_json_body(self):
        """Test the bearer header, the JSON body and the request URL"""
        response = mock.Mock(status_code=201)
        response.json.return_value = {'success': True, 'data': {'_id': 1}}
        session = mock.Mock()
        session.request.return_value = response
        client = ApiClient(base_url='http://api.test/api/v1', token='tok', session=session)

        envelope = client.post('/vendors/', json={'name': 'Acme'})
        self.assertEqual(envelope.record, {'_id': 1})
        args, kwargs = session.request.call_args
        self.assertEqual(args, ('POST', 'http://api.test/api/v1/vendors/'))
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer tok')
        self.assertEqual(kwargs['json'], {'name': 'Acme'})
        self.assertEqual(kwargs['timeout'], 5)

    def test_server_message_passes_through(self):
        """Test that the server's error message reaches the ApiError"""
        response = mock.Mock(status_code=400)
        response.json.return_value = {'success': False, 'error': 'Username already exists'}
        session = mock.Mock()
        session.request.return_value = response
        client = ApiClient(base_url=API_URL, session=session)
        with self.assertRaises(ApiError) as ctx:
            client.post('vendors/', json={})
        self.assertEqual(ctx.exception.message, 'Username already exists')
        self.assertEqual(ctx.exception.status, 400)


class StorageAndSessionTests(SimpleTestCase):
    """Test the local storage and the sessions kept in it"""

    def test_storage_round_trip(self):
        """Test storing, reading and removing a value"""
        storage = temp_storage()
        self.assertIsNone(storage.get('userData'))
        storage.set('userData', {'token': 't'})
        self.assertEqual(LocalStorage(storage.path).get('userData'), {'token': 't'})
        storage.remove('userData')
        self.assertIsNone(storage.get('userData'))

    def test_unreadable_storage_is_empty(self):
        """Test that a corrupt storage file reads as empty"""
        storage = temp_storage()
        with open(storage.path, 'w') as fh:
            fh.write('{not json')
        self.assertEqual(storage.get('userData', 'missing'), 'missing')

    def test_failed_write_leaves_no_temp_file(self):
        """Test that a value json cannot encode keeps the old document and no temp file"""
        storage = temp_storage()
        storage.set('userData', {'token': 't'})
        with self.assertRaises(TypeError):
            storage.set('vendorData', {'token': object()})
        self.assertEqual(os.listdir(os.path.dirname(storage.path)), ['storage.json'])
        self.assertEqual(storage.get('userData'), {'token': 't'})
        self.assertIsNone(storage.get('vendorData'))

    def test_login_logout_transitions(self):
        """Test the session login and logout transitions"""
        storage = temp_storage()
        session = Session(ADMIN, storage)
        self.assertFalse(session.is_authenticated)
        with self.assertRaises(SessionError):
            session.logout()

        session.login('tok', {'username': 'root'})
        self.assertTrue(session.is_authenticated)
        self.assertEqual(storage.get('userData')['token'], 'tok')
        with self.assertRaises(SessionError):
            session.login('other', {})

        restored = Session(ADMIN, storage)
        self.assertTrue(restored.is_authenticated)
        self.assertEqual(restored.display_name, 'root')

        restored.logout()
        self.assertIsNone(storage.get('userData'))
        self.assertFalse(Session(ADMIN, storage).is_authenticated)

    def test_apps_use_separate_keys(self):
        """Test that the admin and vendor sessions use separate keys"""
        storage = temp_storage()
        Session(VENDOR, storage).login('vtok', {'username': 'acme'})
        self.assertEqual(storage.get('vendorData')['token'], 'vtok')
        self.assertFalse(Session(ADMIN, storage).is_authenticated)

    def test_login_requires_token(self):
        """Test that logging in needs a token"""
        with self.assertRaises(SessionError):
            Session(ADMIN, temp_storage()).login('', {})


class FormTests(SimpleTestCase):
    """Test the client side forms"""

    def test_required_field(self):
        """Test that a missing required field fails validation"""
        form = VendorForm(data={'name': 'Acme', 'username': 'acme1', 'password': 'secret1'})
        self.assertFalse(form.is_valid())
        self.assertIn('brandName', form.errors)

    def test_password_optional_when_editing(self):
        """Test that the password may be left out when editing"""
        form = VendorForm(data={'name': 'Acme', 'username': 'acme1', 'brandName': 'AcmeBrand'}, instance={'_id': 1})
        self.assertTrue(form.is_valid())
        self.assertNotIn('password', form.to_payload().data)

    def test_product_types_default_list_price(self):
        """Test that a type without a list price defaults to its price"""
        form = ProductForm(data={
            'title': 'Mango', 'description': 'Sweet', 'category': 1,
            'tag': 'seasonal, fresh', 'types': [{'title': '1 kg', 'price': '120'}],
        })
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertFalse(payload.multipart)
        self.assertEqual(payload.data['tag'], ['seasonal', 'fresh'])
        self.assertEqual(payload.data['types'][0]['withoutDiscountPrice'], '120')

    def test_product_needs_a_type(self):
        """Test that a product needs at least one type"""
        form = ProductForm(data={'title': 'Mango', 'description': 'Sweet', 'category': 1, 'types': '[]'})
        self.assertFalse(form.is_valid())
        self.assertIn('types', form.errors)

    def test_multipart_payload_encoding(self):
        """Test encoding a payload with files as multipart form data"""
        payload = Payload({'types': [{'title': 'x'}], 'selectAll': True, 'price': 5}, files=[('image', ('a.png', b'x', 'image/png'))])
        kwargs = payload.request_kwargs()
        self.assertEqual(json.loads(kwargs['data']['types']), [{'title': 'x'}])
        self.assertEqual(kwargs['data']['selectAll'], 'true')
        self.assertEqual(kwargs['data']['price'], '5')
        self.assertEqual(len(kwargs['files']), 1)

    def test_subscription_select_all_and_main_index(self):
        """Test select all franchises and the main image index check"""
        data = {
            'title': 'Fruit Box', 'description': 'Daily', 'category': 'Fruits', 'weightOrCount': '1 kg',
            'types': [{'title': 'Monthly', 'price': '999', 'withoutDiscountPrice': '1199'}],
            'selectAll': True, 'mainImageIndex': 2,
        }
        form = SubscriptionForm(data=data, files={'images': [make_png('a.png')]}, franchise_ids=[4, 7])
        self.assertFalse(form.is_valid())
        self.assertIn('mainImageIndex', form.errors)

        data['mainImageIndex'] = 0
        form = SubscriptionForm(data=data, files={'images': [make_png('a.png')]}, franchise_ids=[4, 7])
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['franchiseIds'], [4, 7])
        self.assertNotIn('selectAll', form.to_payload().data)

    def test_subscription_images_required_on_create(self):
        """Test that images are required when creating a subscription"""
        form = SubscriptionForm(data={
            'title': 'Fruit Box', 'description': 'Daily', 'category': 'Fruits', 'weightOrCount': '1 kg',
            'types': [{'title': 'Monthly', 'price': '999', 'withoutDiscountPrice': '1199'}],
        })
        self.assertFalse(form.is_valid())
        self.assertIn('images', form.errors)


class TableTests(SimpleTestCase):
    """Test rendering records as text tables"""

    def test_render_table(self):
        """Test the default columns of a table"""
        rows = [{'_id': 1, 'name': 'Acme', 'blocked': False, 'meta': {'x': 1}}]
        output = render_table(rows)
        self.assertIn('_id', output.splitlines()[0])
        self.assertNotIn('meta', output)
        self.assertIn('no', output)
        self.assertEqual(render_table([]), '(no records)')

    def test_dotted_columns(self):
        """Test dotted column names"""
        output = render_table([{'userId': {'name': 'Asha'}}], ['userId.name'])
        self.assertIn('Asha', output)


@override_settings(MEDIA_ROOT=tempfile.mkdtemp(), FALBITES_CONSOLE_HOME=tempfile.mkdtemp())
class ConsoleTestCase(TestCase):
    """Controllers talk to the real API through an in-process requests session"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(username='root', phone='9000000001', password='secret123')
        self.api = ApiClient(base_url=API_URL, session=RequestsClient())
        self.storage = temp_storage()

    def admin_session(self):
        session = Session(ADMIN, self.storage)
        session.login(admin_token(self.admin), {'username': 'root'})
        self.api.token = session.token
        return session

    def open_page(self, page_class, **kwargs):
        return page_class(self.api, session=self.admin_session(), **kwargs).mount()


class ShellTests(ConsoleTestCase):
    """Test the navigation shell"""

    def test_anonymous_is_sent_to_login(self):
        """Test that an anonymous visitor lands on the login page"""
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        page = shell.navigate('/vendors')
        self.assertIsInstance(page, AdminLoginPage)
        self.assertEqual(shell.current_path, '/login')

    def test_login_then_navigate(self):
        """Test logging in and moving between pages"""
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        page = shell.login({'phone': '9000000001', 'password': 'secret123'})
        self.assertIsInstance(page, ProductPage)
        self.assertTrue(shell.session.is_authenticated)
        self.assertEqual(self.storage.get('userData')['profile']['username'], 'root')

        TestDataFactory.create_vendor(name='Acme')
        page = shell.navigate('vendors')
        self.assertIsInstance(page, VendorPage)
        self.assertEqual(shell.current_path, '/vendors')
        self.assertEqual([item['name'] for item in page.items], ['Acme'])

        # Visiting the login page while signed in lands on the home page
        self.assertIsInstance(shell.navigate('/login'), ProductPage)

    def test_wrong_password_keeps_login_page(self):
        """Test that a wrong password keeps the login page"""
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        page = shell.login({'phone': '9000000001', 'password': 'wrong'})
        self.assertIsInstance(page, AdminLoginPage)
        self.assertFalse(shell.session.is_authenticated)
        self.assertTrue(page.banner)

    def test_logout(self):
        """Test that logging out clears the token and the stored session"""
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        shell.login({'phone': '9000000001', 'password': 'secret123'})
        page = shell.logout()
        self.assertIsInstance(page, AdminLoginPage)
        self.assertIsNone(self.api.token)
        self.assertIsNone(self.storage.get('userData'))

    def test_session_restored_from_storage(self):
        """Test that a stored session is picked up by a new shell"""
        self.admin_session()
        shell = Shell(ADMIN, client=ApiClient(base_url=API_URL, session=RequestsClient()), storage=self.storage)
        self.assertIsInstance(shell.navigate('/vendors'), VendorPage)

    def test_unknown_route_and_sidebar(self):
        """Test unknown routes and the sidebar state"""
        self.admin_session()
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        with self.assertRaises(UnknownRoute):
            shell.resolve('/nowhere')
        self.assertTrue(shell.sidebar_open)
        self.assertFalse(shell.toggle_sidebar())
        shell.navigate('/reviews')
        active = [path for path, _title, is_active in shell.sidebar() if is_active]
        self.assertEqual(active, ['/reviews'])

    def test_vendor_app(self):
        """Test the vendor dashboard login and its products page"""
        vendor = TestDataFactory.create_vendor(username='acme', password='acmepass')
        TestDataFactory.create_product(title='Acme Jam', creator=vendor, status='pending')
        TestDataFactory.create_product(title='Someone Else')

        shell = Shell(VENDOR, client=self.api, storage=self.storage)
        self.assertEqual(shell.navigate('/').__class__.__name__, 'VendorLoginPage')
        page = shell.login({'username': 'acme', 'password': 'acmepass'})
        self.assertIsInstance(page, VendorProductPage)
        self.assertEqual([item['title'] for item in page.items], ['Acme Jam'])
        self.assertEqual(self.storage.get('vendorData')['profile']['username'], 'acme')
        self.assertIsNone(self.storage.get('userData'))


class VendorPageTests(ConsoleTestCase):
    """Test the CRUD cycle on the vendors page"""

    def test_create_closes_modal_and_adds_row(self):
        """Test that creating a vendor closes the modal and adds the row"""
        page = self.open_page(VendorPage)
        page.open_modal()
        ok = page.submit({'name': 'Acme', 'username': 'acme1', 'password': 'secret1', 'brandName': 'AcmeBrand'})
        self.assertTrue(ok)
        self.assertFalse(page.modal_open)
        self.assertEqual(len(page.items), 1)
        self.assertEqual(page.items[0]['brandName'], 'AcmeBrand')
        self.assertTrue(Vendor.objects.get(username='acme1').check_password('secret1'))

    def test_missing_required_field_blocks_request(self):
        """Test that an invalid form sends no request"""
        page = self.open_page(VendorPage)
        page.open_modal()
        with mock.patch.object(self.api, 'request', wraps=self.api.request) as spy:
            ok = page.submit({'name': 'Acme', 'username': 'acme1', 'password': 'secret1', 'brandName': ''})
        self.assertFalse(ok)
        spy.assert_not_called()
        self.assertIn('brandName', page.form.errors)
        self.assertTrue(page.modal_open)
        self.assertFalse(Vendor.objects.exists())

    def test_server_rejection_shows_banner(self):
        """Test that a server rejection shows a banner and keeps the modal open"""
        TestDataFactory.create_vendor(username='acme1')
        page = self.open_page(VendorPage)
        page.open_modal()
        ok = page.submit({'name': 'Acme', 'username': 'acme1', 'password': 'secret1', 'brandName': 'AcmeBrand'})
        self.assertFalse(ok)
        self.assertEqual(page.banner, 'Username already exists')
        self.assertTrue(page.modal_open)
        self.assertFalse(page.submitting)

    def test_edit_replaces_row(self):
        """Test that editing a vendor replaces its row"""
        vendor = TestDataFactory.create_vendor(name='Acme', username='acme1', brand_name='Old')
        page = self.open_page(VendorPage)
        page.open_modal(page.items[0])
        ok = page.submit({'name': 'Acme', 'username': 'acme1', 'brandName': 'New'})
        self.assertTrue(ok)
        self.assertEqual(page.items[0]['brandName'], 'New')
        vendor.refresh_from_db()
        self.assertEqual(vendor.brand_name, 'New')

    def test_delete_removes_only_that_row(self):
        """Test that deleting removes only that row"""
        first = TestDataFactory.create_vendor(name='First')
        second = TestDataFactory.create_vendor(name='Second')
        page = self.open_page(VendorPage)
        self.assertTrue(page.delete(first.pk))
        self.assertEqual([item['_id'] for item in page.items], [second.pk])

    def test_client_search_is_case_insensitive(self):
        """Test that client side search ignores case"""
        TestDataFactory.create_vendor(name='Acme', brand_name='Acme Foods')
        TestDataFactory.create_vendor(name='Bolt', brand_name='Bolt Snacks')
        page = self.open_page(VendorPage)
        self.assertEqual([item['name'] for item in page.search('aCmE')], ['Acme'])
        self.assertEqual([item['name'] for item in page.search('snacks')], ['Bolt'])
        self.assertEqual(page.search('zzz'), [])
        self.assertEqual(len(page.search('')), 2)

    def test_failed_fetch_keeps_previous_items(self):
        """Test that a failed fetch keeps the previous items"""
        TestDataFactory.create_vendor(name='Acme')
        page = self.open_page(VendorPage)
        with mock.patch.object(self.api.session, 'request', side_effect=requests.ConnectionError('down')):
            result = page.fetch_list()
        self.assertEqual(result, [])
        self.assertEqual(page.banner, NETWORK_ERROR_MESSAGE)
        self.assertEqual([item['name'] for item in page.items], ['Acme'])
        self.assertFalse(page.loading)

    def test_unexpected_error_is_contained(self):
        """Test that an unexpected error becomes a banner"""
        page = self.open_page(VendorPage)
        with mock.patch.object(self.api.session, 'request', side_effect=RuntimeError('boom')):
            self.assertEqual(page.fetch_list(), [])
        self.assertEqual(page.banner, 'An unexpected error occurred. Please try again.')

    def test_unmount_drops_late_response(self):
        """Test that responses arriving after unmount are dropped"""
        TestDataFactory.create_vendor(name='Acme')
        page = self.open_page(VendorPage)
        original = self.api.session.request
        TestDataFactory.create_vendor(name='Late')

        def unmount_during_request(*args, **kwargs):
            response = original(*args, **kwargs)
            page.unmount()
            return response

        with mock.patch.object(self.api.session, 'request', side_effect=unmount_during_request):
            page.fetch_list()
        self.assertEqual([item['name'] for item in page.items], ['Acme'])
        self.assertIsNone(page.banner)

        # Nothing is sent at all once unmounted
        with mock.patch.object(self.api.session, 'request') as send:
            page.fetch_list()
        send.assert_not_called()


class ReviewPageTests(ConsoleTestCase):
    """Test the reviews page"""

    def test_filter_by_partner_newest_first(self):
        """Test filtering reviews by partner, newest first"""
        partner = TestDataFactory.create_delivery_partner()
        older = TestDataFactory.create_review(partner=partner, rating=2, date=timezone.now() - timedelta(days=30))
        newer = TestDataFactory.create_review(partner=partner, rating=4)
        TestDataFactory.create_review(rating=5)

        page = self.open_page(ReviewPage)
        self.assertEqual(len(page.items), 3)
        page.filter_by(delivery_partner_id=partner.pk)
        self.assertEqual([item['_id'] for item in page.items], [newer.pk, older.pk])
        self.assertEqual(page.average_rating(), 3.0)

    def test_delete_missing_review(self):
        """Test deleting a review that does not exist"""
        review = TestDataFactory.create_review()
        page = self.open_page(ReviewPage)
        self.assertFalse(page.delete(99999))
        self.assertEqual(page.banner, 'Review not found')
        self.assertEqual([item['_id'] for item in page.items], [review.pk])
        self.assertEqual(Review.objects.count(), 1)

    def test_search_nested_fields(self):
        """Test searching nested fields"""
        TestDataFactory.create_review(user=TestDataFactory.create_customer(name='Asha'))
        TestDataFactory.create_review(user=TestDataFactory.create_customer(name='Vikram'))
        page = self.open_page(ReviewPage)
        self.assertEqual([item['userId']['name'] for item in page.search('ASHA')], ['Asha'])

    def test_create_not_supported(self):
        """Test that reviews cannot be created from the page"""
        page = self.open_page(ReviewPage)
        self.assertFalse(page.submit({'description': 'x'}))
        self.assertIn('does not support', page.banner)


class ServerSearchTests(ConsoleTestCase):
    """Test pages that search on the server"""

    def test_product_search_is_debounced(self):
        """Test that the product search is debounced"""
        TestDataFactory.create_product(title='Red Apple')
        TestDataFactory.create_product(title='Banana')
        clock = FakeClock()
        page = self.open_page(ProductPage, clock=clock)
        self.assertEqual(len(page.items), 2)

        self.assertIsNone(page.search('app'))
        clock.advance(0.1)
        page.search('apple')
        self.assertFalse(page.tick())
        self.assertEqual(len(page.items), 2)

        clock.advance(0.5)
        self.assertTrue(page.tick())
        self.assertEqual([item['title'] for item in page.items], ['Red Apple'])

        page.search('')
        page.flush()
        self.assertEqual(len(page.items), 2)

    def test_product_category_filter(self):
        """Test filtering products by category"""
        fruits = TestDataFactory.create_category(title='Fruits')
        TestDataFactory.create_product(title='Apple', category=fruits)
        TestDataFactory.create_product(title='Carrot')
        page = self.open_page(ProductPage)
        page.filter_by_category(fruits.pk)
        self.assertEqual([item['title'] for item in page.items], ['Apple'])

    def test_brand_pages(self):
        """Test paging and searching brands"""
        for title in ('Amul', 'Britannia', 'Cadbury'):
            TestDataFactory.create_brand(title=title)
        page = BrandPage(self.api, session=self.admin_session())
        page.limit = 2
        page.mount()
        self.assertEqual([item['title'] for item in page.items], ['Amul', 'Britannia'])
        self.assertTrue(page.has_more)
        self.assertEqual([item['title'] for item in page.load_more()], ['Cadbury'])
        self.assertFalse(page.has_more)

        page.search('cad')
        page.flush()
        self.assertEqual([item['title'] for item in page.items], ['Cadbury'])


class ProductEditTests(ConsoleTestCase):
    """Test editing products from the products page"""

    def test_edit_keeps_variant_images(self):
        """Test that resubmitting a product keeps the image of each variant"""
        product = TestDataFactory.create_product(title='Mango')
        ProductType.objects.filter(product=product).update(image_url='http://x/mango.png')
        page = self.open_page(ProductPage)
        item = page.items[0]

        page.open_modal(item)
        ok = page.submit({
            'title': 'Mango Deluxe', 'description': item['description'],
            'category': item['category']['_id'], 'types': item['types'],
        })
        self.assertTrue(ok, page.banner)
        variant = ProductType.objects.get(product=product)
        self.assertEqual(variant.image_url, 'http://x/mango.png')
        self.assertEqual(variant.title, 'Regular')
        self.assertEqual(page.items[0]['title'], 'Mango Deluxe')
        self.assertEqual(page.items[0]['types'][0]['imageUrl'], 'http://x/mango.png')


class OperationPageTests(ConsoleTestCase):
    """Test the one-off actions of the operation pages"""

    def test_payout_refetches_wallets(self):
        """Test that a payout refreshes the partner wallets"""
        partner = TestDataFactory.create_delivery_partner(wallet=Decimal('500.00'))
        page = self.open_page(PayoutPage)
        page.open_modal()
        ok = page.submit({'deliveryPartnerId': partner.pk, 'monthName': 'March', 'date': '2026-03-31', 'amount': '200'})
        self.assertTrue(ok)
        self.assertEqual(page.notice, 'Payout successful.')
        self.assertEqual(Decimal(str(page.items[0]['wallet'])), Decimal('300.00'))
        history = page.load_history(partner.pk)
        self.assertEqual(history[0]['monthName'], 'March')

    def test_payout_insufficient_balance(self):
        """Test a payout larger than the wallet balance"""
        partner = TestDataFactory.create_delivery_partner(wallet=Decimal('50.00'))
        page = self.open_page(PayoutPage)
        page.open_modal()
        ok = page.submit({'deliveryPartnerId': partner.pk, 'monthName': 'March', 'date': '2026-03-31', 'amount': '200'})
        self.assertFalse(ok)
        self.assertEqual(page.banner, 'Insufficient wallet balance.')
        self.assertTrue(page.modal_open)
        partner.refresh_from_db()
        self.assertEqual(partner.wallet, Decimal('50.00'))

    def test_user_block_toggle_keeps_tag(self):
        """Test that blocking a user keeps the user's tag"""
        customer = TestDataFactory.create_customer(name='Asha')
        TestDataFactory.create_subscription_order(user=customer)
        page = self.open_page(UserPage)
        self.assertEqual(page.total_users, 1)
        self.assertTrue(page.toggle_block(customer.pk))
        self.assertTrue(page.items[0]['blocked'])
        self.assertEqual(page.items[0]['tag'], 'customer')

    def test_wallet_form_validation(self):
        """Test the wallet credit form"""
        customer = TestDataFactory.create_customer()
        page = self.open_page(UserPage)
        self.assertFalse(page.add_balance(customer.pk, 50, 'no'))
        self.assertIn('reason', page.form.errors)
        self.assertTrue(page.add_balance(customer.pk, 50, 'Festival bonus'))
        self.assertEqual(Decimal(str(page.items[0]['wallet'])), Decimal('50.00'))

    def test_server_field_errors_reach_the_form(self):
        """Test that server field errors are attached to the form"""
        customer = TestDataFactory.create_customer()
        page = self.open_page(FranchisePage)
        page.open_modal()
        ok = page.submit({
            'name': 'Baner', 'cityName': 'Pune', 'branchName': 'Baner',
            'totalDeliveryRadius': 5, 'freeDeliveryRadius': 2, 'chargePerExtraKm': 4,
            'assignedManagerId': customer.pk,
        })
        self.assertFalse(ok)
        self.assertIn('assignedManagerId', page.form.errors)

    def test_franchise_create_and_assign_manager(self):
        """Test creating a franchise and assigning its manager"""
        manager = TestDataFactory.create_manager(name='Meena')
        page = self.open_page(FranchisePage)
        page.open_modal()
        self.assertTrue(page.submit({
            'name': 'Baner', 'cityName': 'Pune', 'branchName': 'Baner', 'locationName': 'Baner Road',
            'lat': 18.55, 'lang': 73.78, 'totalDeliveryRadius': 5, 'freeDeliveryRadius': 2, 'chargePerExtraKm': 4,
        }))
        franchise_id = page.items[0]['_id']
        self.assertEqual(page.items[0]['location']['locationName'], 'Baner Road')
        self.assertEqual([m['name'] for m in page.load_managers()], ['Meena'])
        self.assertTrue(page.assign_manager(franchise_id, manager.pk))
        self.assertEqual(page.items[0]['assignedManager']['name'], 'Meena')

    def test_subscription_create_with_images(self):
        """Test creating a subscription with uploaded images"""
        first = TestDataFactory.create_franchise(name='One')
        second = TestDataFactory.create_franchise(name='Two')
        page = self.open_page(SubscriptionPage)
        self.assertEqual(len(page.franchises), 2)
        page.open_modal()
        ok = page.submit(
            {
                'title': 'Fruit Box', 'description': 'Daily fruit', 'category': 'Fruits', 'weightOrCount': '1 kg',
                'types': [{'title': 'Monthly', 'price': '999', 'withoutDiscountPrice': '1199'}],
                'selectAll': True, 'mainImageIndex': 1,
            },
            files={'images': [make_png('a.png'), make_png('b.png')]},
        )
        self.assertTrue(ok, page.banner)
        created = page.items[0]
        self.assertTrue(created['imageUrl'][0].endswith('-b.png'))
        self.assertEqual(sorted(created['franchiseIds']), sorted([first.pk, second.pk]))
        self.assertEqual(Subscription.objects.count(), 1)

    def test_partner_verification(self):
        """Test approving a delivery partner"""
        partner = TestDataFactory.create_delivery_partner()
        page = self.open_page(PartnerVerificationPage)
        self.assertTrue(page.set_status(partner.pk, 'approved'))
        self.assertEqual(page.items[0]['onboardingStatus'], 'approved')
        self.assertEqual(DeliveryPartner.objects.get().onboarding_status, 'approved')
        self.assertFalse(page.set_status(partner.pk, 'maybe'))


class DashboardCommandTests(ConsoleTestCase):
    """Test the dashboard management command"""

    def setUp(self):
        super().setUp()
        # Each test starts from an empty console storage
        override = self.settings(FALBITES_CONSOLE_HOME=tempfile.mkdtemp())
        override.enable()
        self.addCleanup(override.disable)

    def run_command(self, *args):
        out = io.StringIO()
        factory = lambda base_url=None: ApiClient(base_url=API_URL, session=RequestsClient())
        with mock.patch('falbites.console.management.commands.dashboard.ApiClient', side_effect=factory):
            call_command('dashboard', *args, stdout=out)
        return out.getvalue()

    def test_routes(self):
        """Test listing the routes"""
        output = self.run_command('routes')
        self.assertIn('/vendors', output)
        self.assertIn('/reviews', output)

    def test_list_requires_login(self):
        """Test that listing needs a session"""
        with self.assertRaises(CommandError):
            self.run_command('list', 'vendors')

    def test_login_list_create_delete(self):
        """Test the login, list, create, update and delete commands"""
        output = self.run_command('login', '--phone', '9000000001', '--password', 'secret123')
        self.assertIn('Logged in as root', output)

        self.run_command('create', 'vendors', 'name=Acme', 'username=acme1', 'password=secret1', 'brandName=AcmeBrand')
        vendor = Vendor.objects.get(username='acme1')

        output = self.run_command('list', 'vendors', '--search', 'acme')
        self.assertIn('AcmeBrand', output)
        self.assertIn('1 record(s)', output)

        self.run_command('update', 'vendors', str(vendor.pk), 'brandName=Acme Fresh')
        vendor.refresh_from_db()
        self.assertEqual(vendor.brand_name, 'Acme Fresh')

        self.run_command('delete', 'vendors', str(vendor.pk))
        self.assertFalse(Vendor.objects.exists())

        self.run_command('logout')
        self.assertIn('anonymous', self.run_command('whoami'))

    def test_validation_errors_are_reported(self):
        """Test that form errors are reported"""
        self.run_command('login', '--phone', '9000000001', '--password', 'secret123')
        with self.assertRaises(CommandError) as ctx:
            self.run_command('create', 'vendors', 'name=Acme')
        self.assertIn('brandName', str(ctx.exception))

    def test_update_product_keeps_references(self):
        """Test that updating one product field sends populated references back as ids"""
        fruits = TestDataFactory.create_category(title='Fruits')
        product = TestDataFactory.create_product(title='Mango', category=fruits)
        product.brand = TestDataFactory.create_brand(title='Amul')
        product.save()
        self.run_command('login', '--phone', '9000000001', '--password', 'secret123')

        output = self.run_command('update', 'products', str(product.pk), 'title=Mango Deluxe')
        self.assertIn('Mango Deluxe', output)
        product.refresh_from_db()
        self.assertEqual(product.title, 'Mango Deluxe')
        self.assertEqual(product.category_id, fruits.pk)
        self.assertEqual(product.brand.title, 'Amul')
        self.assertEqual(product.types.count(), 1)

    def test_list_dashboard_cards(self):
        """Test that listing the dashboard prints its summary cards"""
        TestDataFactory.create_subscription_order()
        self.run_command('login', '--phone', '9000000001', '--password', 'secret123')
        output = self.run_command('list', 'dashboard')
        self.assertIn('Total Sales', output)
        self.assertIn('Active Subscriptions', output)
        self.assertIn('6 record(s)', output)


class OrderDeliveryPageTests(ConsoleTestCase):
    """Test changing the per-day delivery status of subscription orders"""

    def test_set_delivery_status(self):
        """Test that a new delivery status replaces the order row"""
        order = TestDataFactory.create_subscription_order()
        delivery = TestDataFactory.create_delivery_date(order=order)
        page = self.open_page(OrderDeliveryPage)
        self.assertEqual([entry['_id'] for entry in page.deliveries(order.pk)], [delivery.pk])

        self.assertTrue(page.set_delivery_status(order.pk, delivery.pk, 'delivered'))
        self.assertEqual(page.notice, 'Delivery status updated successfully')
        self.assertEqual([entry['status'] for entry in page.deliveries(order.pk)], ['delivered'])
        self.assertEqual(page.deliveries(order.pk, status='pending'), [])
        delivery.refresh_from_db()
        self.assertEqual(delivery.status, 'delivered')

    def test_unknown_status_is_not_sent(self):
        """Test that a status outside the choices fails in the form"""
        delivery = TestDataFactory.create_delivery_date()
        page = self.open_page(OrderDeliveryPage)
        self.assertFalse(page.set_delivery_status(delivery.order_id, delivery.pk, 'lost'))
        self.assertIn('status', page.form.errors)
        delivery.refresh_from_db()
        self.assertEqual(delivery.status, 'pending')

    def test_non_delivery_day_is_locked(self):
        """Test that the server refuses to change a non delivery day"""
        delivery = TestDataFactory.create_delivery_date(status=DeliveryDate.NON_DELIVERY_DAY)
        page = self.open_page(OrderDeliveryPage)
        self.assertFalse(page.set_delivery_status(delivery.order_id, delivery.pk, 'delivered'))
        self.assertEqual(page.banner, 'Cannot change the status of a non delivery day')

    def test_delivery_of_another_order(self):
        """Test that a delivery id from another order is not found"""
        order = TestDataFactory.create_subscription_order()
        other = TestDataFactory.create_delivery_date()
        page = self.open_page(OrderDeliveryPage)
        self.assertFalse(page.set_delivery_status(order.pk, other.pk, 'delivered'))
        self.assertEqual(page.banner, 'Delivery date not found')


class AttendancePageTests(ConsoleTestCase):
    """Test the delivery attendance page"""

    def test_mark_attendance(self):
        """Test that marking a record updates its row and the day summary"""
        partner = TestDataFactory.create_delivery_partner(first_name='Ravi')
        record = TestDataFactory.create_attendance(partner=partner)
        page = self.open_page(AttendancePage)
        self.assertEqual(page.summary()['pending'], 1)

        self.assertTrue(page.mark(record.pk, 'present'))
        self.assertEqual(page.notice, 'Attendance status updated successfully.')
        self.assertEqual(page.items[0]['status'], 'present')
        self.assertEqual(page.summary(), {'pending': 0, 'present': 1, 'absent': 0, 'holiday': 0})
        record.refresh_from_db()
        self.assertEqual(record.status, 'present')

    def test_mark_rejects_unknown_status(self):
        """Test that an unknown attendance status fails in the form"""
        record = TestDataFactory.create_attendance()
        page = self.open_page(AttendancePage)
        self.assertFalse(page.mark(record.pk, 'late'))
        self.assertIn('status', page.form.errors)

    def test_mark_unknown_record(self):
        """Test marking a record that is not on the page"""
        page = self.open_page(AttendancePage)
        self.assertFalse(page.mark(99999, 'present'))
        self.assertEqual(page.banner, 'Attendance record not found')

    def test_filter_and_search(self):
        """Test filtering attendance by date and status and searching by partner"""
        today = timezone.localdate()
        ravi = TestDataFactory.create_delivery_partner(first_name='Ravi')
        sunil = TestDataFactory.create_delivery_partner(first_name='Sunil')
        TestDataFactory.create_attendance(partner=ravi, date=today, status='present')
        TestDataFactory.create_attendance(partner=sunil, date=today, status='absent')
        TestDataFactory.create_attendance(partner=ravi, date=today - timedelta(days=1), status='absent')

        page = self.open_page(AttendancePage)
        self.assertEqual(len(page.items), 3)
        page.filter_by(date=today.isoformat())
        self.assertEqual(len(page.items), 2)
        page.filter_by(date=today.isoformat(), status='absent')
        self.assertEqual([item['DeliveryPartnerId']['firstName'] for item in page.items], ['Sunil'])
        page.filter_by()
        self.assertEqual([item['status'] for item in page.search('ravi')], ['present', 'absent'])


class CategoryChoicePageTests(ConsoleTestCase):
    """Test the category choices page"""

    def test_create_and_edit_product_choice(self):
        """Test creating a product choice and renaming it"""
        product = TestDataFactory.create_product(title='Mango')
        page = self.open_page(CategoryChoicePage)
        page.open_modal()
        self.assertTrue(page.submit({'title': 'Breakfast', 'types': 'product', 'productId': product.pk}), page.banner)
        self.assertEqual(page.items[0]['productId'], product.pk)

        page.open_modal(page.items[0])
        self.assertTrue(page.submit({'title': 'Brunch', 'types': 'product', 'productId': product.pk}), page.banner)
        self.assertEqual([item['title'] for item in page.items], ['Brunch'])
        self.assertEqual(CategoryChoice.objects.get().title, 'Brunch')

    def test_product_choice_needs_a_product(self):
        """Test that a product choice without a product sends no request"""
        page = self.open_page(CategoryChoicePage)
        page.open_modal()
        self.assertFalse(page.submit({'title': 'Breakfast', 'types': 'product'}))
        self.assertIn('productId', page.form.errors)
        self.assertFalse(CategoryChoice.objects.exists())

    def test_subscription_choice(self):
        """Test a subscription choice and the filter by type"""
        TestDataFactory.create_category_choice(title='Snacks')
        page = self.open_page(CategoryChoicePage)
        page.open_modal()
        self.assertFalse(page.submit({'title': 'Fruit boxes', 'types': 'subscription'}))
        self.assertIn('category', page.form.errors)
        self.assertTrue(page.submit({'title': 'Fruit boxes', 'types': 'subscription', 'category': 'Fruits'}))
        self.assertEqual([item['title'] for item in page.of_type('subscription')], ['Fruit boxes'])
        self.assertEqual([item['title'] for item in page.of_type('product')], ['Snacks'])

    def test_delete_choice(self):
        """Test deleting a choice"""
        choice = TestDataFactory.create_category_choice()
        page = self.open_page(CategoryChoicePage)
        self.assertTrue(page.delete(choice.pk))
        self.assertEqual(page.notice, 'Category deleted successfully')
        self.assertEqual(page.items, [])


class SettingsPageTests(ConsoleTestCase):
    """Test the settings page"""

    def setUp(self):
        super().setUp()
        cache.clear()

    def test_maintenance_toggle(self):
        """Test switching maintenance mode on"""
        page = self.open_page(SettingsPage)
        self.assertFalse(page.current['maintenance'])
        self.assertTrue(page.set_maintenance(True))
        self.assertEqual(page.notice, 'Settings updated successfully')
        self.assertTrue(page.current['maintenance'])
        self.assertTrue(PlatformSetting.load().maintenance)

    def test_links_are_merged(self):
        """Test that saving one link keeps the links saved before"""
        page = self.open_page(SettingsPage)
        self.assertTrue(page.save({
            'website': 'https://falbites.in', 'rechargeOptions': [{'amount': 500, 'cashback': 25}],
        }), page.banner)
        self.assertTrue(page.save({'about': 'https://falbites.in/about'}), page.banner)
        self.assertEqual(page.current['links'], {'website': 'https://falbites.in', 'about': 'https://falbites.in/about'})
        self.assertEqual(page.current['rechargeOptions'], [{'amount': 500, 'cashback': 25}])

        page.mount()
        self.assertEqual(page.current['links']['website'], 'https://falbites.in')

    def test_invalid_values_are_not_sent(self):
        """Test that a bad website or recharge option fails in the form"""
        page = self.open_page(SettingsPage)
        self.assertFalse(page.save({'website': 'falbites.in'}))
        self.assertIn('website', page.form.errors)
        self.assertFalse(page.save({'rechargeOptions': [{'amount': 0}]}))
        self.assertIn('rechargeOptions', page.form.errors)
        self.assertEqual(PlatformSetting.load().links, {})


class ProductOrderPageTests(ConsoleTestCase):
    """Test the product orders pages of both dashboards"""

    def test_admin_sets_status(self):
        """Test that the admin changes an order's status"""
        order = TestDataFactory.create_product_order()
        page = self.open_page(ProductOrderPage)
        self.assertEqual(page.count, 1)
        self.assertTrue(page.set_status(order.pk, 'Delivered'))
        self.assertEqual(page.notice, 'Order status updated successfully')
        self.assertEqual(page.items[0]['status'], 'Delivered')
        self.assertFalse(page.set_status(order.pk, 'Lost'))
        self.assertIn('status', page.form.errors)

    def test_vendor_sees_own_orders(self):
        """Test that a vendor only sees orders of their products and cannot delete them"""
        vendor = TestDataFactory.create_vendor(username='acme', password='acmepass')
        own = TestDataFactory.create_product_order(product=TestDataFactory.create_product(creator=vendor))
        TestDataFactory.create_product_order()

        shell = Shell(VENDOR, client=self.api, storage=self.storage)
        shell.login({'username': 'acme', 'password': 'acmepass'})
        page = shell.navigate('/orders')
        self.assertIsInstance(page, ProductOrderPage)
        self.assertEqual([item['_id'] for item in page.items], [own.pk])
        self.assertFalse(page.delete(own.pk))
        self.assertEqual(page.banner, 'Only admins can delete orders')
        self.assertTrue(ProductOrder.objects.filter(pk=own.pk).exists())


class DashboardPageTests(ConsoleTestCase):
    """Test the dashboard home page"""

    def test_cards_and_charts(self):
        """Test that the page reads the cards and the chart series"""
        TestDataFactory.create_subscription_order()
        TestDataFactory.create_subscription_order(status='Cancelled')
        page = self.open_page(DashboardPage)
        self.assertEqual(len(page.stats), 6)
        self.assertEqual(page.card('Orders')['value'], '2')
        self.assertEqual(page.card('Active Subscriptions')['value'], '1')
        self.assertEqual(len(page.sales_data), 12)
        self.assertEqual({row['name']: row['value'] for row in page.order_data},
                         {'Active': 1, 'Inactive': 0, 'Cancelled': 1})
        self.assertTrue(page.revenue_data)

    def test_branch_filter(self):
        """Test the figures of one branch and a malformed branch id"""
        branch = TestDataFactory.create_franchise(name='Baner')
        TestDataFactory.create_subscription_order(franchise=branch)
        TestDataFactory.create_subscription_order()
        page = self.open_page(DashboardPage)
        page.select_branch(branch.pk)
        self.assertEqual(page.card('Orders')['value'], '1')

        page.select_branch('abc')
        self.assertEqual(page.banner, 'branchId: Enter a whole number.')
        self.assertEqual(page.card('Orders')['value'], '1')

    def test_shell_keeps_products_as_home(self):
        """Test that the dashboard is a route while products stay the home page"""
        shell = Shell(ADMIN, client=self.api, storage=self.storage)
        self.assertIsInstance(shell.login({'phone': '9000000001', 'password': 'secret123'}), ProductPage)
        self.assertIsInstance(shell.navigate('/dashboard'), DashboardPage)
