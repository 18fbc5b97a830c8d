import django_filters
from django.db.models import Q
from .models import Product, Brand, TopCategory, SubCategory, ProductOrder


class ProductFilter(django_filters.FilterSet):
    """Product search: ``q`` matches title or description, case-insensitive"""
    q = django_filters.CharFilter(method='filter_q', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=Product.STATUS_CHOICES)

    class Meta:
        model = Product
        fields = ['q', 'category', 'status']

    def filter_q(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


class BrandFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='title', lookup_expr='icontains')

    class Meta:
        model = Brand
        fields = ['search']


class TopCategoryFilter(django_filters.FilterSet):
    categoryId = django_filters.NumberFilter(field_name='category_id')

    class Meta:
        model = TopCategory
        fields = ['categoryId']


class SubCategoryFilter(django_filters.FilterSet):
    topCategoryId = django_filters.NumberFilter(field_name='top_category_id')

    class Meta:
        model = SubCategory
        fields = ['topCategoryId']


class ProductOrderFilter(django_filters.FilterSet):
    userId = django_filters.NumberFilter(field_name='user_id')
    status = django_filters.ChoiceFilter(field_name='status', choices=ProductOrder.STATUS_CHOICES)

    class Meta:
        model = ProductOrder
        fields = ['userId', 'status']
