"""
Tests for the reviews API
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from falbites.core.test_utils import TestDataFactory
from falbites.reviews.models import Review


class ReviewCreateTests(TestCase):
    """Test anonymous review submission"""

    def setUp(self):
        self.client = APIClient()
        self.partner = TestDataFactory.create_delivery_partner()
        self.subscription = TestDataFactory.create_subscription()
        self.user = TestDataFactory.create_customer()

    def payload(self, **overrides):
        data = {
            'description': 'Box arrived early and cold',
            'rating': 4,
            'deliveryPartnerId': self.partner.pk,
            'subscriptionId': self.subscription.pk,
            'userId': self.user.pk,
        }
        data.update(overrides)
        return data

    def test_create_without_authentication(self):
        """Test that anyone can create a review and it is dated on creation"""
        response = self.client.post('/api/v1/reviews/', self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['review']['rating'], 4)
        self.assertEqual(response.data['review']['deliveryPartnerId'], self.partner.pk)
        self.assertIsNotNone(Review.objects.get().date)

    def test_rating_bounds(self):
        """Test that ratings outside 1-5 fail with the generic create error"""
        for rating in (0, 6):
            response = self.client.post('/api/v1/reviews/', self.payload(rating=rating), format='json')
            self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
            self.assertEqual(response.data, {'success': False, 'message': 'Failed to create review'})
        self.assertFalse(Review.objects.exists())

    def test_unknown_references(self):
        """Test that a missing subscription fails with the generic create error"""
        response = self.client.post('/api/v1/reviews/', self.payload(subscriptionId=99999), format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'message': 'Failed to create review'})
        self.assertFalse(Review.objects.exists())


class ReviewListTests(TestCase):
    """Test listing and filtering reviews"""

    def setUp(self):
        self.client = APIClient()
        self.partner = TestDataFactory.create_delivery_partner(first_name='Ravi')
        self.other_partner = TestDataFactory.create_delivery_partner(first_name='Sunil')
        self.subscription = TestDataFactory.create_subscription(title='Fruit Box')
        now = timezone.now()
        self.old = TestDataFactory.create_review(
            partner=self.partner, subscription=self.subscription, rating=3, date=now - timedelta(days=2)
        )
        self.new = TestDataFactory.create_review(
            partner=self.partner, subscription=self.subscription, rating=5, date=now
        )
        self.unrelated = TestDataFactory.create_review(partner=self.other_partner, date=now - timedelta(days=1))

    def test_all_reviews_newest_first(self):
        """Test that reviews are listed newest first"""
        response = self.client.get('/api/v1/reviews/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [row['_id'] for row in response.data['reviews']]
        self.assertEqual(ids, [self.new.pk, self.unrelated.pk, self.old.pk])

    def test_filter_by_partner_and_subscription(self):
        """Test filtering by partner and subscription with both populated"""
        response = self.client.get('/api/v1/reviews/', {
            'deliveryPartnerId': self.partner.pk, 'subscriptionId': self.subscription.pk
        })
        rows = response.data['reviews']
        self.assertEqual([row['_id'] for row in rows], [self.new.pk, self.old.pk])
        self.assertEqual(rows[0]['deliveryPartnerId']['firstName'], 'Ravi')
        self.assertEqual(rows[0]['subscriptionId']['title'], 'Fruit Box')

    def test_filter_without_matches(self):
        """Test that an unmatched filter returns an empty list"""
        response = self.client.get('/api/v1/reviews/', {'deliveryPartnerId': 99999})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['reviews'], [])

    def test_malformed_filter(self):
        """Test that a non-numeric filter id fails with the generic fetch error"""
        response = self.client.get('/api/v1/reviews/', {'deliveryPartnerId': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'message': 'Failed to fetch reviews'})

    def test_franchise_populated(self):
        """Test that the franchise and its manager are populated"""
        manager = TestDataFactory.create_manager(name='Meena')
        franchise = TestDataFactory.create_franchise(name='Baner', manager=manager)
        review = TestDataFactory.create_review(franchise=franchise)
        response = self.client.get('/api/v1/reviews/', {'deliveryPartnerId': review.delivery_partner_id})
        row = response.data['reviews'][0]
        self.assertEqual(row['franchiseId']['name'], 'Baner')
        self.assertEqual(row['franchiseId']['assignedManager']['name'], 'Meena')


class ReviewDeleteTests(TestCase):
    """Test deleting reviews"""

    def setUp(self):
        self.client = APIClient()

    def test_delete(self):
        """Test deleting a review"""
        review = TestDataFactory.create_review()
        response = self.client.delete(f'/api/v1/reviews/{review.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Review deleted')
        self.assertFalse(Review.objects.exists())

    def test_delete_missing(self):
        """Test deleting a review that does not exist"""
        response = self.client.delete('/api/v1/reviews/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'message': 'Review not found'})
