"""
Tests for customers, wallets and managers
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from falbites.core.models import AuditLog
from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from falbites.users.models import Customer, WalletTransaction
from falbites.users.utils import customer_tag


class CustomerTagTests(TestCase):
    """Test customer tags"""

    def test_tags(self):
        """Test the tag derived from a customer's latest order"""
        user = TestDataFactory.create_customer()
        self.assertEqual(customer_tag(None), 'user')

        order = TestDataFactory.create_subscription_order(user=user)
        order.remaining_days = 0
        self.assertEqual(customer_tag(order), 'expired')

        order.remaining_days = 10
        self.assertEqual(customer_tag(order), 'customer')

        order.payment_type = 'COD'
        self.assertEqual(customer_tag(order), 'cod')


class UserAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_user()
        self.client.authenticate_user(self.admin)

    def test_list_counts_and_tags(self):
        """Test the customer totals and the tag on each row"""
        plain = TestDataFactory.create_customer(name='Plain')
        paying = TestDataFactory.create_customer(name='Paying')
        TestDataFactory.create_subscription_order(user=paying)

        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalUsers'], 2)
        self.assertEqual(response.data['totalCustomer'], 1)
        tags = {row['_id']: row['tag'] for row in response.data['data']}
        self.assertEqual(tags[plain.pk], 'user')
        self.assertEqual(tags[paying.pk], 'customer')

    def test_list_respects_limit(self):
        """Test that the list honours limit"""
        for _ in range(3):
            TestDataFactory.create_customer()
        response = self.client.get('/api/v1/users/', {'limit': 2})
        self.assertEqual(len(response.data['data']), 2)
        self.assertEqual(response.data['totalUsers'], 3)

    def test_vendor_token_forbidden(self):
        """Test that vendors cannot list customers"""
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail_and_delete(self):
        """Test reading and deleting a customer"""
        customer = TestDataFactory.create_customer(name='Asha')
        response = self.client.get(f'/api/v1/users/{customer.pk}/')
        self.assertEqual(response.data['data']['name'], 'Asha')

        response = self.client.delete(f'/api/v1/users/{customer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Customer.objects.filter(pk=customer.pk).exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', model_name='Customer').exists())

    def test_missing_user(self):
        """Test the not found error for an unknown customer"""
        response = self.client.get('/api/v1/users/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'User not found.')

    def test_toggle_block_twice(self):
        """Test that blocking toggles back and forth"""
        customer = TestDataFactory.create_customer()
        response = self.client.patch(f'/api/v1/users/toggle-block/{customer.pk}/')
        self.assertTrue(response.data['data']['blocked'])
        self.assertEqual(response.data['message'], 'User blocked successfully.')
        response = self.client.patch(f'/api/v1/users/toggle-block/{customer.pk}/')
        self.assertFalse(response.data['data']['blocked'])

    def test_add_balance(self):
        """Test crediting a customer's wallet"""
        customer = TestDataFactory.create_customer(wallet=Decimal('10.00'))
        response = self.client.post(
            '/api/v1/users/add-balance/', {'userId': customer.pk, 'amount': 150, 'reason': 'Refund for order'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.wallet, Decimal('160.00'))
        self.assertEqual(WalletTransaction.objects.filter(customer=customer, type='credit').count(), 1)
        self.assertTrue(AuditLog.objects.filter(action='wallet_credit').exists())

    def test_add_balance_limits(self):
        """Test the wallet credit bounds"""
        customer = TestDataFactory.create_customer()
        response = self.client.post(
            '/api/v1/users/add-balance/', {'userId': customer.pk, 'amount': 20000, 'reason': 'Too much money'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(
            '/api/v1/users/add-balance/', {'userId': customer.pk, 'amount': 10, 'reason': 'shrt'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        customer.refresh_from_db()
        self.assertEqual(customer.wallet, Decimal('0.00'))

    def test_add_balance_unknown_user(self):
        """Test crediting an unknown customer"""
        response = self.client.post(
            '/api/v1/users/add-balance/', {'userId': 99999, 'amount': 10, 'reason': 'Refund again'}
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(WalletTransaction.objects.count(), 0)

    def test_assign_franchise(self):
        """Test assigning a customer to a franchise"""
        customer = TestDataFactory.create_customer()
        franchise = TestDataFactory.create_franchise(name='Central')
        response = self.client.patch(
            f'/api/v1/users/assign-franchise/{customer.pk}/', {'franchiseId': franchise.pk}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['assignedFranchise']['name'], 'Central')

        response = self.client.patch(f'/api/v1/users/assign-franchise/{customer.pk}/', {'franchiseId': 99999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ManagerAPITests(TestCase):
    """Test manager endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_list_delete(self):
        """Test creating, listing and deleting managers"""
        response = self.client.post('/api/v1/admin/create-manager/', {'mobileNumber': '9123456780', 'name': 'Meena'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        manager_id = response.data['data']['_id']
        self.assertEqual(response.data['data']['role'], 'manager')
        self.assertTrue(response.data['data']['referCode'])

        response = self.client.get('/api/v1/admin/get-managers/')
        self.assertEqual([row['_id'] for row in response.data['data']], [manager_id])

        response = self.client.delete(f'/api/v1/admin/delete-manager/{manager_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Customer.objects.filter(pk=manager_id).exists())

    def test_duplicate_mobile_number(self):
        """Test that manager mobile numbers are unique"""
        TestDataFactory.create_manager(mobile_number='9123456780')
        response = self.client.post('/api/v1/admin/create-manager/', {'mobileNumber': '9123456780'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Manager already exists with this mobile number.')

        TestDataFactory.create_customer(mobile_number='9123456781')
        response = self.client.post('/api/v1/admin/create-manager/', {'mobileNumber': '9123456781'})
        self.assertEqual(response.data['error'], 'This mobile number is already registered as a user.')

    def test_invalid_mobile_number(self):
        """Test that invalid mobile numbers are rejected"""
        response = self.client.post('/api/v1/admin/create-manager/', {'mobileNumber': '12345'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_non_manager(self):
        """Test that plain customers cannot be deleted as managers"""
        customer = TestDataFactory.create_customer()
        response = self.client.delete(f'/api/v1/admin/delete-manager/{customer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Customer.objects.filter(pk=customer.pk).exists())
