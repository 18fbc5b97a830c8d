import django_filters
from django.db.models import Q
from .models import Subscription, SubscriptionOrder


class SubscriptionFilter(django_filters.FilterSet):
    """``q`` matches title or description, case-insensitive; ``category`` is exact"""
    q = django_filters.CharFilter(method='filter_q', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='exact')

    class Meta:
        model = Subscription
        fields = ['q', 'category']

    def filter_q(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


class SubscriptionOrderFilter(django_filters.FilterSet):
    userId = django_filters.NumberFilter(field_name='user_id')
    subscriptionId = django_filters.NumberFilter(field_name='subscription_id')
    status = django_filters.ChoiceFilter(field_name='subscription_status', choices=SubscriptionOrder.STATUS_CHOICES)

    class Meta:
        model = SubscriptionOrder
        fields = ['userId', 'subscriptionId', 'status']
