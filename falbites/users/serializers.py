from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from falbites.franchises.models import Franchise
from .models import Customer, mobile_number_validator


class FranchiseSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    cityName = serializers.CharField(source='city_name', read_only=True)

    class Meta:
        model = Franchise
        fields = ['_id', 'name', 'cityName']


class CustomerSerializer(DocumentSerializer):
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)
    referCode = serializers.CharField(source='refer_code', read_only=True)
    wallet = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, coerce_to_string=False)
    assignedFranchise = FranchiseSummarySerializer(source='assigned_franchise', read_only=True)

    class Meta:
        model = Customer
        fields = ['_id', 'name', 'mobileNumber', 'email', 'wallet', 'referCode', 'role',
                  'blocked', 'assignedFranchise', 'createdAt', 'updatedAt']


class CustomerListSerializer(CustomerSerializer):
    """Customer row plus the subscription ``tag`` computed by the view"""
    tag = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['tag']

    def get_tag(self, obj):
        return self.context.get('tags', {}).get(obj.pk, 'user')


class CustomerSummarySerializer(serializers.ModelSerializer):
    """Fields inlined when another record references a customer"""
    _id = serializers.IntegerField(source='pk', read_only=True)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)

    class Meta:
        model = Customer
        fields = ['_id', 'name', 'mobileNumber']


class ManagerCreateSerializer(serializers.Serializer):
    mobileNumber = serializers.CharField(validators=[mobile_number_validator])
    name = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')


class AddBalanceSerializer(serializers.Serializer):
    userId = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1, max_value=10000)
    reason = serializers.CharField(min_length=5, max_length=200)

