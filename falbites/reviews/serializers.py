from rest_framework import serializers
from falbites.delivery.models import DeliveryPartner
from falbites.franchises.models import Franchise
from falbites.franchises.serializers import LocationSerializer, ManagerSummarySerializer
from falbites.subscriptions.models import Subscription
from falbites.users.models import Customer
from falbites.users.serializers import CustomerSummarySerializer
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    """Write shape: references are plain ids"""
    _id = serializers.IntegerField(source='pk', read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)
    deliveryPartnerId = serializers.PrimaryKeyRelatedField(source='delivery_partner', queryset=DeliveryPartner.objects.all())
    subscriptionId = serializers.PrimaryKeyRelatedField(source='subscription', queryset=Subscription.objects.all())
    userId = serializers.PrimaryKeyRelatedField(source='user', queryset=Customer.objects.all())
    franchiseId = serializers.PrimaryKeyRelatedField(
        source='franchise', queryset=Franchise.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Review
        fields = ['_id', 'description', 'rating', 'image', 'date',
                  'deliveryPartnerId', 'subscriptionId', 'userId', 'franchiseId']


class ReviewPartnerSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)
    vehicleType = serializers.CharField(source='vehicle_type', read_only=True)

    class Meta:
        model = DeliveryPartner
        fields = ['_id', 'firstName', 'lastName', 'mobileNumber', 'vehicleType', 'city', 'branch']


class ReviewSubscriptionSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    imageUrl = serializers.ListField(source='image_urls', read_only=True)

    class Meta:
        model = Subscription
        fields = ['_id', 'title', 'imageUrl']


class ReviewFranchiseSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    location = LocationSerializer(source='*', read_only=True)
    cityName = serializers.CharField(source='city_name', read_only=True)
    branchName = serializers.CharField(source='branch_name', read_only=True)
    assignedManager = ManagerSummarySerializer(source='assigned_manager', read_only=True)

    class Meta:
        model = Franchise
        fields = ['_id', 'location', 'name', 'cityName', 'branchName', 'assignedManager']


class ReviewDetailSerializer(serializers.ModelSerializer):
    """Read shape: every reference populated"""
    _id = serializers.IntegerField(source='pk', read_only=True)
    deliveryPartnerId = ReviewPartnerSerializer(source='delivery_partner', read_only=True)
    subscriptionId = ReviewSubscriptionSerializer(source='subscription', read_only=True)
    userId = CustomerSummarySerializer(source='user', read_only=True)
    franchiseId = ReviewFranchiseSerializer(source='franchise', read_only=True)

    class Meta:
        model = Review
        fields = ['_id', 'description', 'rating', 'image', 'date',
                  'deliveryPartnerId', 'subscriptionId', 'userId', 'franchiseId']
