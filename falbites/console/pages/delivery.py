from falbites.console.forms import (
    PayoutForm, OnboardingStatusForm, BulkDeliveryForm, BulkDeliveryStatusForm, UnavailableLocationForm,
    AttendanceMarkForm
)
from .base import PageController

PARTNER_SEARCH_FIELDS = ('firstName', 'lastName', 'mobileNumber', 'city', 'branch', 'vehicleType')


class DeliveryPartnerPage(PageController):
    title = 'Delivery partners'
    endpoint = 'delivery-partners/'
    search_fields = PARTNER_SEARCH_FIELDS
    allow_create = False
    allow_update = False


class PartnerVerificationPage(DeliveryPartnerPage):
    """Onboarding review: approve or reject partners"""
    title = 'Delivery partner verification'

    def set_status(self, partner_id, status):
        envelope = self.action(
            'PATCH', f'delivery-partners/change-status/{partner_id}/', OnboardingStatusForm,
            {'onboardingStatus': status}
        )
        if envelope is None:
            return False
        new_status = envelope.extra.get('onboardingStatus', status)
        self.items = [
            {**item, 'onboardingStatus': new_status} if str(item.get('_id')) == str(partner_id) else item
            for item in self.items
        ]
        return True


class PayoutPage(PageController):
    """Lists partners with their wallets; the form pays one of them out"""
    title = 'Payouts'
    endpoint = 'delivery-partners/'
    create_endpoint = 'payout/'
    form_class = PayoutForm
    search_fields = PARTNER_SEARCH_FIELDS
    allow_update = False
    refetch_after_submit = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.history = {}

    def load_history(self, partner_id):
        """Payout history for one partner, newest first"""
        envelope = self.call('GET', f'payout/{partner_id}/')
        if envelope is None:
            return []
        self.history[str(partner_id)] = list(envelope.items)
        return self.history[str(partner_id)]


class BoxPage(PageController):
    title = 'Box info'
    endpoint = 'boxes/'
    search_fields = ('partnerId.firstName', 'partnerId.lastName', 'orderId.userID.name',
                     'orderId.userID.mobileNumber', 'status', 'remark')
    allow_create = False
    allow_update = False


class BulkDeliveryPage(PageController):
    title = 'Bulk deliveries'
    endpoint = 'bulk-delivery/'
    form_class = BulkDeliveryForm
    search_fields = ('name', 'address', 'phoneNumber', 'status')

    def set_status(self, delivery_id, status):
        envelope = self.action(
            'PATCH', f'bulk-delivery/status/{delivery_id}/', BulkDeliveryStatusForm, {'status': status}
        )
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True


class UnavailableLocationPage(PageController):
    title = 'Unavailable locations'
    endpoint = 'unavailable-locations/'
    list_key = 'locations'
    form_class = UnavailableLocationForm
    search_fields = ('city', 'area', 'pinCode', 'reason')


class AttendancePage(PageController):
    """Daily attendance of delivery partners"""
    title = 'Delivery attendance'
    endpoint = 'attendance/'
    search_fields = ('DeliveryPartnerId.firstName', 'DeliveryPartnerId.lastName',
                     'DeliveryPartnerId.mobileNumber', 'status')
    allow_create = False
    allow_update = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.filters = {}

    def list_params(self):
        return dict(self.filters) or None

    def filter_by(self, date=None, status=None):
        self.filters = {key: value for key, value in (('date', date), ('status', status)) if value}
        return self.fetch_list()

    def summary(self):
        counts = {'pending': 0, 'present': 0, 'absent': 0, 'holiday': 0}
        for item in self.visible_items():
            if item.get('status') in counts:
                counts[item['status']] += 1
        return counts

    def mark(self, record_id, status):
        record = next((item for item in self.items if str(item.get('_id')) == str(record_id)), None)
        if record is None:
            self.banner = 'Attendance record not found'
            return False
        partner = record.get('DeliveryPartnerId') or {}
        data = {'type': record.get('type', 'delivery-partner'), 'id': partner.get('_id'),
                'date': record.get('date'), 'status': status}
        envelope = self.action('PUT', 'attendance/mark/', AttendanceMarkForm, data)
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True
