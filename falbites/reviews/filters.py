import django_filters
from .models import Review


class ReviewFilter(django_filters.FilterSet):
    deliveryPartnerId = django_filters.NumberFilter(field_name='delivery_partner_id')
    subscriptionId = django_filters.NumberFilter(field_name='subscription_id')

    class Meta:
        model = Review
        fields = ['deliveryPartnerId', 'subscriptionId']
