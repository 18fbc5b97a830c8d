"""
Tests for delivery partners, payouts, box reviews, bulk deliveries, unavailable locations and attendance
"""
import tempfile
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from falbites.core.models import AuditLog
from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_png
from falbites.delivery.models import (
    DeliveryPartner, PayoutTransaction, BoxReview, BulkDelivery, UnavailableLocation, Attendance
)
from falbites.delivery.utils import generate_transaction_id


class DeliveryPartnerAPITests(TestCase):
    """Test delivery partner endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_filtered_by_onboarding_status(self):
        """Test filtering partners by onboarding status"""
        TestDataFactory.create_delivery_partner(first_name='Pending')
        TestDataFactory.create_delivery_partner(first_name='Approved', onboarding_status='approved')
        response = self.client.get('/api/v1/delivery-partners/', {'onboardingStatus': 'pending'})
        self.assertEqual([row['firstName'] for row in response.data['data']], ['Pending'])
        response = self.client.get('/api/v1/delivery-partners/')
        self.assertEqual(len(response.data['data']), 2)

    def test_detail_includes_branch(self):
        """Test that the detail inlines the assigned branch"""
        branch = TestDataFactory.create_franchise(name='Kothrud Hub')
        partner = TestDataFactory.create_delivery_partner(branch=branch)
        response = self.client.get(f'/api/v1/delivery-partners/{partner.pk}/')
        self.assertEqual(response.data['data']['assignedBranch']['name'], 'Kothrud Hub')

    def test_patch_cannot_touch_wallet(self):
        """Test that PATCH leaves the wallet alone"""
        partner = TestDataFactory.create_delivery_partner(wallet=Decimal('100.00'))
        response = self.client.patch(
            f'/api/v1/delivery-partners/{partner.pk}/', {'vehicleType': 'Scooter', 'wallet': '9999'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Delivery Partner updated.')
        partner.refresh_from_db()
        self.assertEqual(partner.vehicle_type, 'Scooter')
        self.assertEqual(partner.wallet, Decimal('100.00'))

    def test_delete_is_audited(self):
        """Test that deleting a partner writes an audit log entry"""
        partner = TestDataFactory.create_delivery_partner()
        response = self.client.delete(f'/api/v1/delivery-partners/{partner.pk}/')
        self.assertEqual(response.data['message'], 'Delivery Partner deleted.')
        self.assertFalse(DeliveryPartner.objects.exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', model_name='DeliveryPartner').exists())

    def test_missing_partner(self):
        """Test the not found message for an unknown partner"""
        response = self.client.get('/api/v1/delivery-partners/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Delivery Partner not found.')

    def test_change_onboarding_status(self):
        """Test approving a partner's onboarding"""
        partner = TestDataFactory.create_delivery_partner()
        response = self.client.patch(
            f'/api/v1/delivery-partners/change-status/{partner.pk}/', {'onboardingStatus': 'approved'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['onboardingStatus'], 'approved')
        partner.refresh_from_db()
        self.assertEqual(partner.onboarding_status, 'approved')
        log = AuditLog.objects.get(action='status_change')
        self.assertEqual(log.changes, {'onboardingStatus': ['pending', 'approved']})

    def test_change_onboarding_status_rejects_unknown_value(self):
        """Test that an unknown onboarding status is rejected"""
        partner = TestDataFactory.create_delivery_partner()
        response = self.client.patch(
            f'/api/v1/delivery-partners/change-status/{partner.pk}/', {'onboardingStatus': 'maybe'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PayoutAPITests(TestCase):
    """Test payouts out of partner wallets"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.partner = TestDataFactory.create_delivery_partner(wallet=Decimal('500.00'))

    def payout(self, amount, partner_id=None):
        return self.client.post('/api/v1/payout/', {
            'monthName': 'March',
            'date': '2026-03-31',
            'amount': amount,
            'deliveryPartnerId': partner_id or self.partner.pk,
        }, format='json')

    def test_payout_deducts_wallet(self):
        """Test that a payout is deducted from the wallet"""
        response = self.payout(200)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Payout successful.')
        self.assertTrue(response.data['data']['transactionId'].startswith('TRX'))
        self.partner.refresh_from_db()
        self.assertEqual(self.partner.wallet, Decimal('300.00'))
        self.assertTrue(AuditLog.objects.filter(action='payout').exists())

    def test_whole_wallet_can_be_paid_out(self):
        """Test paying out the exact wallet balance"""
        response = self.payout(500)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.partner.refresh_from_db()
        self.assertEqual(self.partner.wallet, Decimal('0.00'))

    def test_insufficient_balance(self):
        """Test that a payout above the balance is refused"""
        response = self.payout(501)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Insufficient wallet balance.')
        self.partner.refresh_from_db()
        self.assertEqual(self.partner.wallet, Decimal('500.00'))
        self.assertFalse(PayoutTransaction.objects.exists())

    def test_amount_limits(self):
        """Test the payout amount bounds"""
        self.assertEqual(self.payout(0).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.payout(100001).status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_partner(self):
        """Test a payout to an unknown partner"""
        response = self.payout(10, partner_id=99999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Delivery Partner not found.')

    def test_history_newest_first(self):
        """Test that payout history lists the newest date first"""
        PayoutTransaction.objects.create(
            transaction_id='TRX100001', delivery_partner=self.partner, month_name='January',
            date='2026-01-31', amount=Decimal('50.00')
        )
        PayoutTransaction.objects.create(
            transaction_id='TRX100002', delivery_partner=self.partner, month_name='February',
            date='2026-02-28', amount=Decimal('60.00')
        )
        response = self.client.get(f'/api/v1/payout/{self.partner.pk}/')
        self.assertEqual([row['monthName'] for row in response.data['data']], ['February', 'January'])
        self.assertEqual(set(response.data['data'][0].keys()), {'monthName', 'date', 'amount'})

    def test_transaction_ids_are_unique(self):
        """Test that generated transaction ids do not repeat"""
        ids = {generate_transaction_id() for _ in range(20)}
        self.assertTrue(all(len(value) == 9 for value in ids))


class BoxReviewAPITests(TestCase):
    """Test box review endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_empty_list_is_bare_array(self):
        """Test that an empty list is a bare JSON array"""
        response = self.client.get('/api/v1/boxes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_list_populates_order_and_partner(self):
        """Test that reviews inline their order and partner"""
        user = TestDataFactory.create_customer(name='Asha')
        order = TestDataFactory.create_subscription_order(user=user)
        partner = TestDataFactory.create_delivery_partner(first_name='Ravi')
        TestDataFactory.create_box_review(order=order, partner=partner)
        response = self.client.get('/api/v1/boxes/')
        row = response.data[0]
        self.assertEqual(row['orderId']['userID']['name'], 'Asha')
        self.assertEqual(row['partnerId']['firstName'], 'Ravi')
        self.assertTrue(row['isBoxPicked'])

    def test_delete(self):
        """Test deleting a box review"""
        review = TestDataFactory.create_box_review()
        response = self.client.delete(f'/api/v1/boxes/{review.pk}/')
        self.assertEqual(response.data['message'], 'Box review deleted successfully')
        self.assertFalse(BoxReview.objects.exists())
        response = self.client.delete(f'/api/v1/boxes/{review.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class BulkDeliveryAPITests(TestCase):
    """Test bulk delivery endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def payload(self, **overrides):
        data = {
            'name': 'Infosys Canteen',
            'address': 'Hinjewadi Phase 2',
            'phoneNumber': '9876543210',
            'deliveryDate': '2026-05-01',
        }
        data.update(overrides)
        return data

    def test_create_requires_image(self):
        """Test that a bulk delivery needs an image"""
        response = self.client.post('/api/v1/bulk-delivery/', self.payload(), format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(BulkDelivery.objects.exists())

        response = self.client.post(
            '/api/v1/bulk-delivery/', self.payload(image=make_png('bulk.png')), format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'pending')
        self.assertTrue(response.data['data']['imageUrl'].endswith('-bulk.png'))

    def test_phone_number_length(self):
        """Test the phone number length rules"""
        response = self.client.post(
            '/api/v1/bulk-delivery/', self.payload(phoneNumber='12345', image=make_png()), format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phoneNumber', response.data['errors'])

    def test_status_transitions(self):
        """Test moving a bulk delivery between statuses"""
        entry = TestDataFactory.create_bulk_delivery()
        response = self.client.patch(
            f'/api/v1/bulk-delivery/status/{entry.pk}/', {'status': 'delivered'}, format='json'
        )
        self.assertEqual(response.data['message'], 'Status updated to delivered')
        response = self.client.patch(
            f'/api/v1/bulk-delivery/status/{entry.pk}/', {'status': 'lost'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status. Allowed: pending, delivered, cancelled')
        entry.refresh_from_db()
        self.assertEqual(entry.status, 'delivered')

    def test_update_and_delete(self):
        """Test updating and deleting an entry"""
        entry = TestDataFactory.create_bulk_delivery()
        response = self.client.put(f'/api/v1/bulk-delivery/{entry.pk}/', {'name': 'TCS'}, format='multipart')
        self.assertEqual(response.data['data']['name'], 'TCS')
        response = self.client.delete(f'/api/v1/bulk-delivery/{entry.pk}/')
        self.assertEqual(response.data['message'], 'Bulk delivery entry deleted successfully')
        response = self.client.get(f'/api/v1/bulk-delivery/{entry.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class UnavailableLocationAPITests(TestCase):
    """Test unavailable location endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_uses_default_reason(self):
        """Test that a new location gets the default reason"""
        customer = TestDataFactory.create_customer(name='Asha')
        response = self.client.post('/api/v1/unavailable-locations/', {
            'city': 'Pune', 'area': 'Wagholi', 'pinCode': '412207', 'addedById': customer.pk
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['location']['reason'], 'Service currently unavailable')
        self.assertEqual(response.data['location']['addedBy']['name'], 'Asha')

    def test_list_key(self):
        """Test that the list is returned under locations"""
        TestDataFactory.create_unavailable_location()
        response = self.client.get('/api/v1/unavailable-locations/')
        self.assertTrue(response.data['success'])
        self.assertEqual(len(response.data['locations']), 1)

    def test_update_and_delete(self):
        """Test updating and deleting a location"""
        location = TestDataFactory.create_unavailable_location()
        response = self.client.put(
            f'/api/v1/unavailable-locations/{location.pk}/', {'reason': 'Flooded roads'}, format='json'
        )
        self.assertEqual(response.data['location']['reason'], 'Flooded roads')
        response = self.client.delete(f'/api/v1/unavailable-locations/{location.pk}/')
        self.assertEqual(response.data['message'], 'Location deleted successfully')
        self.assertFalse(UnavailableLocation.objects.exists())
        response = self.client.get(f'/api/v1/unavailable-locations/{location.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Location not found')


class AttendanceAPITests(TestCase):
    """Test listing and marking delivery partner attendance"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.partner = TestDataFactory.create_delivery_partner(first_name='Sunil')
        self.today = timezone.localdate()

    def mark(self, **overrides):
        data = {'type': 'delivery-partner', 'id': self.partner.pk, 'date': str(self.today), 'status': 'present'}
        data.update(overrides)
        return self.client.put('/api/v1/attendance/mark/', data, format='json')

    def test_list_newest_date_first_with_partner(self):
        """Test that records come newest date first with the partner inlined"""
        TestDataFactory.create_attendance(partner=self.partner, date=self.today - timedelta(days=1))
        TestDataFactory.create_attendance(partner=self.partner, date=self.today, status='present')
        response = self.client.get('/api/v1/attendance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Attendance records fetched successfully.')
        rows = response.data['data']
        self.assertEqual([row['date'] for row in rows], [str(self.today), str(self.today - timedelta(days=1))])
        self.assertEqual(rows[0]['DeliveryPartnerId']['firstName'], 'Sunil')
        self.assertEqual(rows[0]['type'], 'delivery-partner')

    def test_list_filters(self):
        """Test filtering by date, status and partner"""
        other = TestDataFactory.create_delivery_partner(first_name='Amit')
        TestDataFactory.create_attendance(partner=self.partner, status='present')
        TestDataFactory.create_attendance(partner=other, status='absent')
        TestDataFactory.create_attendance(partner=other, date=self.today - timedelta(days=1), status='present')

        response = self.client.get('/api/v1/attendance/', {'date': str(self.today)})
        self.assertEqual(len(response.data['data']), 2)
        response = self.client.get('/api/v1/attendance/', {'status': 'present'})
        self.assertEqual(len(response.data['data']), 2)
        response = self.client.get('/api/v1/attendance/', {'partnerId': other.pk, 'status': 'absent'})
        self.assertEqual(len(response.data['data']), 1)

    def test_list_rejects_malformed_filters(self):
        """Test that a bad date or status is a 400"""
        response = self.client.get('/api/v1/attendance/', {'date': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date', response.data['errors'])
        response = self.client.get('/api/v1/attendance/', {'status': 'late'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mark_updates_existing_record(self):
        """Test marking a partner present for the day"""
        record = TestDataFactory.create_attendance(partner=self.partner)
        response = self.mark()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Attendance status updated successfully.')
        self.assertEqual(response.data['data']['status'], 'present')
        record.refresh_from_db()
        self.assertEqual(record.status, 'present')

    def test_mark_without_record_is_not_found(self):
        """Test that marking never creates a record"""
        TestDataFactory.create_attendance(partner=self.partner, date=self.today - timedelta(days=1))
        response = self.mark()
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'No attendance record found for the given date.')
        self.assertEqual(Attendance.objects.count(), 1)

    def test_mark_validation(self):
        """Test that missing fields, unknown statuses and other staff types are rejected"""
        TestDataFactory.create_attendance(partner=self.partner)
        response = self.client.put('/api/v1/attendance/mark/', {'id': self.partner.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])
        response = self.mark(status='late')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.mark(type='worker')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('type', response.data['errors'])
        self.assertEqual(Attendance.objects.get().status, 'pending')

    def test_requires_admin(self):
        """Test that vendors cannot read attendance"""
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.get('/api/v1/attendance/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
