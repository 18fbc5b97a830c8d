from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from falbites.franchises.models import Franchise
from falbites.franchises.serializers import LocationSerializer
from falbites.subscriptions.models import SubscriptionOrder
from falbites.users.models import Customer
from falbites.users.serializers import CustomerSummarySerializer
from .models import DeliveryPartner, PayoutTransaction, BoxReview, BulkDelivery, UnavailableLocation, Attendance


class BranchSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    cityName = serializers.CharField(source='city_name', read_only=True)
    branchName = serializers.CharField(source='branch_name', read_only=True)
    location = LocationSerializer(source='*', read_only=True)

    class Meta:
        model = Franchise
        fields = ['_id', 'name', 'cityName', 'branchName', 'location']


class DeliveryPartnerSerializer(DocumentSerializer):
    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)
    vehicleType = serializers.CharField(source='vehicle_type', max_length=50)
    profileImageUrl = serializers.CharField(source='profile_image_url', read_only=True)
    wallet = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    onlineStatus = serializers.BooleanField(source='online_status', required=False)
    onboardingStatus = serializers.ChoiceField(
        source='onboarding_status', choices=DeliveryPartner.ONBOARDING_CHOICES, required=False
    )
    assignedBranch = BranchSummarySerializer(source='assigned_branch', read_only=True)
    assignedBranchId = serializers.PrimaryKeyRelatedField(
        source='assigned_branch', queryset=Franchise.objects.all(),
        write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = DeliveryPartner
        fields = ['_id', 'firstName', 'lastName', 'mobileNumber', 'vehicleType', 'city', 'branch',
                  'profileImageUrl', 'rank', 'wallet', 'onlineStatus', 'onboardingStatus',
                  'assignedBranch', 'assignedBranchId', 'createdAt', 'updatedAt']


class OnboardingStatusSerializer(serializers.Serializer):
    onboardingStatus = serializers.ChoiceField(choices=DeliveryPartner.ONBOARDING_CHOICES)


class PayoutRequestSerializer(serializers.Serializer):
    monthName = serializers.CharField(max_length=20)
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1, max_value=100000)
    deliveryPartnerId = serializers.IntegerField()


class PayoutTransactionSerializer(DocumentSerializer):
    transactionId = serializers.CharField(source='transaction_id', read_only=True)
    deliveryPartnerId = serializers.PrimaryKeyRelatedField(source='delivery_partner', read_only=True)
    monthName = serializers.CharField(source='month_name', read_only=True)

    class Meta:
        model = PayoutTransaction
        fields = ['_id', 'transactionId', 'deliveryPartnerId', 'monthName', 'date', 'amount', 'createdAt']


class PayoutHistorySerializer(serializers.ModelSerializer):
    monthName = serializers.CharField(source='month_name', read_only=True)

    class Meta:
        model = PayoutTransaction
        fields = ['monthName', 'date', 'amount']


class BoxOrderSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    userID = CustomerSummarySerializer(source='user', read_only=True)
    subscriptionStatus = serializers.CharField(source='subscription_status', read_only=True)

    class Meta:
        model = SubscriptionOrder
        fields = ['_id', 'userID', 'address', 'subscriptionStatus']


class BoxPartnerSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)
    assignedBranchId = BranchSummarySerializer(source='assigned_branch', read_only=True)

    class Meta:
        model = DeliveryPartner
        fields = ['_id', 'firstName', 'lastName', 'mobileNumber', 'assignedBranchId']


class BoxReviewSerializer(DocumentSerializer):
    orderId = BoxOrderSerializer(source='order', read_only=True)
    partnerId = BoxPartnerSerializer(source='partner', read_only=True)
    boxImage = serializers.CharField(source='box_image', read_only=True)
    deliveryTime = serializers.CharField(source='delivery_time', read_only=True)
    isBoxPicked = serializers.BooleanField(source='is_box_picked', read_only=True)
    isBoxCleaned = serializers.BooleanField(source='is_box_cleaned', read_only=True)

    class Meta:
        model = BoxReview
        fields = ['_id', 'orderId', 'partnerId', 'boxImage', 'remark', 'deliveryTime',
                  'isBoxPicked', 'isBoxCleaned', 'status', 'date', 'createdAt']


class BulkDeliverySerializer(DocumentSerializer):
    phoneNumber = serializers.CharField(source='phone_number', min_length=10, max_length=15)
    deliveryDate = serializers.DateField(source='delivery_date')
    imageUrl = serializers.CharField(source='image_url', max_length=500)
    status = serializers.ChoiceField(choices=BulkDelivery.STATUS_CHOICES, required=False)

    class Meta:
        model = BulkDelivery
        fields = ['_id', 'name', 'address', 'phoneNumber', 'deliveryDate', 'imageUrl', 'status',
                  'createdAt', 'updatedAt']


class UnavailableLocationSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    pinCode = serializers.CharField(source='pin_code', max_length=10)
    reason = serializers.CharField(max_length=255, required=False)
    addedBy = CustomerSummarySerializer(source='added_by', read_only=True)
    addedById = serializers.PrimaryKeyRelatedField(
        source='added_by', queryset=Customer.objects.all(), write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = UnavailableLocation
        fields = ['_id', 'city', 'area', 'pinCode', 'reason', 'addedBy', 'addedById', 'date']
        read_only_fields = ['date']


class AttendanceSerializer(DocumentSerializer):
    DeliveryPartnerId = BoxPartnerSerializer(source='partner', read_only=True)
    type = serializers.SerializerMethodField()

    class Meta:
        model = Attendance
        fields = ['_id', 'DeliveryPartnerId', 'type', 'date', 'status', 'createdAt', 'updatedAt']

    def get_type(self, obj):
        return 'delivery-partner'


class MarkAttendanceSerializer(serializers.Serializer):
    """Body of mark-attendance; only delivery partners keep attendance here"""
    type = serializers.ChoiceField(choices=['delivery-partner'], default='delivery-partner')
    id = serializers.IntegerField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=Attendance.STATUS_CHOICES)
