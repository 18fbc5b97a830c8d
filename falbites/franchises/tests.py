"""
Tests for franchise CRUD and manager assignment
"""
from django.test import TestCase
from rest_framework import status

from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from falbites.franchises.models import Franchise


class FranchiseAPITests(TestCase):
    """Test franchise endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def payload(self, **overrides):
        data = {
            'name': 'Baner Hub',
            'cityName': 'Pune',
            'branchName': 'Baner',
            'location': {'locationName': 'Baner Road', 'lat': 18.559, 'lang': 73.786},
            'totalDeliveryRadius': 8,
            'freeDeliveryRadius': 2,
            'chargePerExtraKm': 6,
        }
        data.update(overrides)
        return data

    def test_create_and_list(self):
        """Test creating a franchise and listing it"""
        response = self.client.post('/api/v1/franchises/', self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Franchise created successfully')
        self.assertEqual(response.data['data']['location']['locationName'], 'Baner Road')

        franchise = Franchise.objects.get()
        self.assertEqual(franchise.latitude, 18.559)
        self.assertEqual(franchise.longitude, 73.786)

        response = self.client.get('/api/v1/franchises/')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['cityName'], 'Pune')

    def test_free_radius_cannot_exceed_total(self):
        """Test that the free radius stays within the total radius"""
        response = self.client.post(
            '/api/v1/franchises/', self.payload(freeDeliveryRadius=12), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('freeDeliveryRadius', response.data['errors'])

    def test_missing_required_field(self):
        """Test that required fields are enforced"""
        data = self.payload()
        del data['cityName']
        response = self.client.post('/api/v1/franchises/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_partial_update(self):
        """Test a partial franchise update"""
        franchise = TestDataFactory.create_franchise(name='Old')
        response = self.client.put(f'/api/v1/franchises/{franchise.pk}/', {'name': 'New'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        franchise.refresh_from_db()
        self.assertEqual(franchise.name, 'New')
        self.assertEqual(franchise.city_name, 'Pune')

    def test_update_checks_radius_against_stored_total(self):
        """Test the radius rule against the stored total"""
        franchise = TestDataFactory.create_franchise()
        response = self.client.put(
            f'/api/v1/franchises/{franchise.pk}/', {'freeDeliveryRadius': 50}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_and_not_found(self):
        """Test deleting a franchise and reading it afterwards"""
        franchise = TestDataFactory.create_franchise()
        response = self.client.delete(f'/api/v1/franchises/{franchise.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get(f'/api/v1/franchises/{franchise.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Franchise not found')

    def test_assign_manager_links_both_sides(self):
        """Test that assigning a manager links franchise and manager"""
        franchise = TestDataFactory.create_franchise()
        manager = TestDataFactory.create_manager(name='Meena')
        response = self.client.patch(
            f'/api/v1/franchises/{franchise.pk}/assign-manager/', {'managerId': manager.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['assignedManager']['name'], 'Meena')
        manager.refresh_from_db()
        self.assertEqual(manager.assigned_franchise, franchise)

    def test_assign_manager_rejects_plain_customer(self):
        """Test that only managers can be assigned"""
        franchise = TestDataFactory.create_franchise()
        customer = TestDataFactory.create_customer()
        response = self.client.patch(
            f'/api/v1/franchises/{franchise.pk}/assign-manager/', {'managerId': customer.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_assign_manager_requires_id(self):
        """Test that a manager id is required"""
        franchise = TestDataFactory.create_franchise()
        response = self.client.patch(f'/api/v1/franchises/{franchise.pk}/assign-manager/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
