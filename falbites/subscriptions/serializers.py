from django.db import transaction
from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from falbites.delivery.models import DeliveryPartner
from falbites.franchises.models import Franchise
from falbites.users.serializers import CustomerSummarySerializer
from .models import Subscription, SubscriptionType, SubscriptionOrder, DeliveryDate, DailyTip


class SubscriptionTypeSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    withoutDiscountPrice = serializers.DecimalField(
        source='without_discount_price', max_digits=10, decimal_places=2, min_value=0
    )
    smallDescription = serializers.CharField(
        source='small_description', max_length=200, required=False, allow_blank=True
    )

    class Meta:
        model = SubscriptionType
        fields = ['_id', 'title', 'price', 'withoutDiscountPrice', 'smallDescription']


class SubscriptionSerializer(DocumentSerializer):
    weightOrCount = serializers.CharField(source='weight_or_count', max_length=100)
    imageUrl = serializers.ListField(source='image_urls', child=serializers.CharField(max_length=500), required=False)
    types = SubscriptionTypeSerializer(many=True)
    franchiseIds = serializers.PrimaryKeyRelatedField(
        source='franchises', queryset=Franchise.objects.all(), many=True, required=False
    )

    class Meta:
        model = Subscription
        fields = ['_id', 'title', 'description', 'category', 'weightOrCount', 'tag', 'imageUrl',
                  'types', 'franchiseIds', 'createdAt', 'updatedAt']

    def validate_types(self, value):
        if not value:
            raise serializers.ValidationError('At least one subscription type is required')
        return value

    def create(self, validated_data):
        types = validated_data.pop('types')
        franchises = validated_data.pop('franchises', [])
        with transaction.atomic():
            subscription = Subscription.objects.create(**validated_data)
            subscription.franchises.set(franchises)
            self._save_types(subscription, types)
        return subscription

    def update(self, instance, validated_data):
        types = validated_data.pop('types', None)
        franchises = validated_data.pop('franchises', None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
            if franchises is not None:
                instance.franchises.set(franchises)
            if types is not None:
                instance.types.all().delete()
                self._save_types(instance, types)
        return instance

    def _save_types(self, subscription, types):
        for position, data in enumerate(types):
            SubscriptionType.objects.create(subscription=subscription, position=position, **data)


class SubscriptionSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    weightOrCount = serializers.CharField(source='weight_or_count', read_only=True)
    imageUrl = serializers.ListField(source='image_urls', read_only=True)

    class Meta:
        model = Subscription
        fields = ['_id', 'title', 'weightOrCount', 'imageUrl']


class DeliveryPartnerSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)

    class Meta:
        model = DeliveryPartner
        fields = ['_id', 'firstName', 'lastName', 'mobileNumber']


class DeliveryDateSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    deliveryPartner = DeliveryPartnerSummarySerializer(source='delivery_partner', read_only=True)
    deliveryTime = serializers.CharField(source='delivery_time', read_only=True)

    class Meta:
        model = DeliveryDate
        fields = ['_id', 'date', 'status', 'description', 'deliveryPartner', 'deliveryTime']


class DeliveryStatusSerializer(serializers.Serializer):
    deliveryId = serializers.IntegerField()
    status = serializers.ChoiceField(choices=DeliveryDate.STATUS_CHOICES)


class SubscriptionOrderSerializer(DocumentSerializer):
    userID = CustomerSummarySerializer(source='user', read_only=True)
    subscriptionId = SubscriptionSummarySerializer(source='subscription', read_only=True)
    franchiseId = serializers.PrimaryKeyRelatedField(source='franchise', read_only=True)
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=10, decimal_places=2, read_only=True)
    finalAmount = serializers.DecimalField(source='final_amount', max_digits=10, decimal_places=2, read_only=True)
    paymentType = serializers.ChoiceField(source='payment_type', choices=SubscriptionOrder.PAYMENT_CHOICES, required=False)
    startDate = serializers.DateField(source='start_date', read_only=True)
    remainingDays = serializers.IntegerField(source='remaining_days', min_value=0, required=False)
    subscriptionStatus = serializers.ChoiceField(
        source='subscription_status', choices=SubscriptionOrder.STATUS_CHOICES, required=False
    )
    deliveryDates = DeliveryDateSerializer(source='delivery_dates', many=True, read_only=True)

    class Meta:
        model = SubscriptionOrder
        fields = ['_id', 'userID', 'subscriptionId', 'franchiseId', 'address', 'totalAmount', 'finalAmount',
                  'paymentType', 'startDate', 'remainingDays', 'subscriptionStatus', 'deliveryDates',
                  'createdAt', 'updatedAt']
        read_only_fields = ['address']


class DailyTipSerializer(DocumentSerializer):
    imageUrl = serializers.CharField(source='image_url', max_length=500, required=False, allow_blank=True)

    class Meta:
        model = DailyTip
        fields = ['_id', 'title', 'imageUrl', 'subscription', 'createdAt', 'updatedAt']
