"""
Tests for vendor accounts and the vendor login
"""
from django.test import TestCase
from rest_framework import status

from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from falbites.vendors.models import Vendor


class VendorModelTests(TestCase):
    """Test the vendor model"""

    def test_password_is_hashed(self):
        """Test that vendor passwords are stored hashed"""
        vendor = TestDataFactory.create_vendor(password='s3cret!')
        self.assertNotEqual(vendor.password, 's3cret!')
        self.assertTrue(vendor.check_password('s3cret!'))
        self.assertFalse(vendor.check_password('wrong'))


class VendorAPITests(TestCase):
    """Test vendor management endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_vendor(self):
        """Test creating a vendor"""
        response = self.client.post('/api/v1/vendors/', {
            'name': 'Acme', 'username': 'acme', 'password': 'acmepass', 'brandName': 'Acme Foods'
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['brandName'], 'Acme Foods')
        self.assertNotIn('password', response.data['data'])
        self.assertTrue(Vendor.objects.get(username='acme').check_password('acmepass'))

    def test_create_requires_all_fields(self):
        """Test that every vendor field is required"""
        response = self.client.post('/api/v1/vendors/', {'name': 'Acme', 'username': 'acme'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'All fields are required: name, username, password, brandName')

    def test_duplicate_username(self):
        """Test that vendor usernames are unique"""
        TestDataFactory.create_vendor(username='acme')
        response = self.client.post('/api/v1/vendors/', {
            'name': 'Other', 'username': 'acme', 'password': 'x12345', 'brandName': 'Other'
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Username already exists')

    def test_update_keeps_password_when_blank(self):
        """Test that a blank password keeps the old one"""
        vendor = TestDataFactory.create_vendor(username='acme', password='original')
        response = self.client.put(f'/api/v1/vendors/{vendor.pk}/', {'brandName': 'Acme Fresh', 'password': ''})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        vendor.refresh_from_db()
        self.assertEqual(vendor.brand_name, 'Acme Fresh')
        self.assertTrue(vendor.check_password('original'))

    def test_update_changes_password(self):
        """Test changing a vendor's password"""
        vendor = TestDataFactory.create_vendor(password='original')
        self.client.put(f'/api/v1/vendors/{vendor.pk}/', {'password': 'changed1'})
        vendor.refresh_from_db()
        self.assertTrue(vendor.check_password('changed1'))

    def test_delete_and_missing(self):
        """Test deleting a vendor and reading it afterwards"""
        vendor = TestDataFactory.create_vendor()
        response = self.client.delete(f'/api/v1/vendors/{vendor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get(f'/api/v1/vendors/{vendor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Vendor not found')

    def test_vendor_cannot_manage_vendors(self):
        """Test that vendors cannot manage vendors"""
        vendor = TestDataFactory.create_vendor()
        self.client.authenticate_vendor(vendor)
        response = self.client.get('/api/v1/vendors/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class VendorLoginTests(TestCase):
    """Test vendor login"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.vendor = TestDataFactory.create_vendor(username='acme', password='acmepass')

    def test_login_returns_working_token(self):
        """Test that the login token opens vendor endpoints"""
        response = self.client.post('/api/v1/vendors/login/', {'username': 'acme', 'password': 'acmepass'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = response.data['data']['token']
        self.assertEqual(response.data['data']['vendor']['username'], 'acme')

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/v1/admin/me/')
        self.assertEqual(response.data['kind'], 'vendor')

    def test_login_wrong_password(self):
        """Test that a wrong password is rejected"""
        response = self.client.post('/api/v1/vendors/login/', {'username': 'acme', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid username or password')

    def test_token_for_deleted_vendor_rejected(self):
        """Test that tokens of deleted vendors stop working"""
        response = self.client.post('/api/v1/vendors/login/', {'username': 'acme', 'password': 'acmepass'})
        token = response.data['data']['token']
        self.vendor.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/v1/admin/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
