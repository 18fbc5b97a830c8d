from .base import PageController


class ReviewPage(PageController):
    """Read and moderate customer reviews of delivery partners"""
    title = 'Reviews'
    endpoint = 'reviews/'
    list_key = 'reviews'
    search_fields = ('description', 'userId.name', 'userId.mobileNumber', 'deliveryPartnerId.firstName',
                     'deliveryPartnerId.lastName', 'subscriptionId.title', 'franchiseId.name')
    allow_create = False
    allow_update = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.delivery_partner_id = None
        self.subscription_id = None

    def list_params(self):
        params = {}
        if self.delivery_partner_id:
            params['deliveryPartnerId'] = self.delivery_partner_id
        if self.subscription_id:
            params['subscriptionId'] = self.subscription_id
        return params or None

    def filter_by(self, delivery_partner_id=None, subscription_id=None):
        self.delivery_partner_id = delivery_partner_id
        self.subscription_id = subscription_id
        return self.fetch_list()

    def average_rating(self):
        ratings = [item['rating'] for item in self.visible_items() if item.get('rating') is not None]
        return round(sum(ratings) / len(ratings), 1) if ratings else None
