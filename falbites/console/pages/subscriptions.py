from falbites.console.forms import SubscriptionForm, DailyTipForm, SubscriptionOrderForm, DeliveryStatusForm
from .base import PageController


class SubscriptionPage(PageController):
    title = 'Subscriptions'
    endpoint = 'subscriptions/'
    form_class = SubscriptionForm
    server_search = True
    search_endpoint = 'subscriptions/search/'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.franchises = []
        self.category = None

    def mount(self):
        super().mount()
        self.load_franchises()
        return self

    def load_franchises(self):
        """Franchise choices for the form's "select all" option"""
        envelope = self.call('GET', 'franchises/')
        if envelope is not None:
            self.franchises = list(envelope.items)
        return self.franchises

    def build_form(self, data, files=None):
        franchise_ids = [franchise['_id'] for franchise in self.franchises]
        return self.form_class(data=data, files=files, instance=self.editing, franchise_ids=franchise_ids)

    def wants_search(self, query):
        return bool(query.strip() or self.category)

    def search_params(self, query):
        params = {'q': query}
        if self.category:
            params['category'] = self.category
        return params

    def filter_by_category(self, category):
        self.category = category
        return self.run_search(self.query)


class DailyTipPage(PageController):
    title = 'Daily tips'
    endpoint = 'dailytips/'
    form_class = DailyTipForm
    search_fields = ('title', 'subscription')
    update_method = 'PATCH'


class SubscriptionOrderPage(PageController):
    title = 'Subscription orders'
    endpoint = 'subscription-orders/'
    form_class = SubscriptionOrderForm
    search_fields = ('userID.name', 'userID.mobileNumber', 'subscriptionId.title',
                     'subscriptionStatus', 'paymentType')
    update_method = 'PATCH'
    allow_create = False

    def by_status(self, status):
        return [item for item in self.visible_items() if item.get('subscriptionStatus') == status]


class OrderDeliveryPage(PageController):
    """Per-day deliveries of each subscription order"""
    title = 'Orders'
    endpoint = 'subscription-orders/'
    search_fields = ('userID.name', 'userID.mobileNumber', 'subscriptionId.title', 'address')
    allow_create = False
    allow_update = False

    def deliveries(self, order_id, status=None):
        for item in self.items:
            if str(item.get('_id')) == str(order_id):
                dates = item.get('deliveryDates') or []
                return [entry for entry in dates if status is None or entry.get('status') == status]
        return []

    def set_delivery_status(self, order_id, delivery_id, status):
        envelope = self.action(
            'PATCH', f'subscription-orders/{order_id}/delivery-status/', DeliveryStatusForm,
            {'deliveryId': delivery_id, 'status': status}
        )
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True
