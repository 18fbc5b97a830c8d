import re

from rest_framework import serializers
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.contrib.auth.password_validation import validate_password
from .models import User, AuditLog, PlatformSetting

WEBSITE_PATTERN = re.compile(r'^https?://.+')


class DocumentSerializer(serializers.ModelSerializer):
    """ModelSerializer exposing the primary key as ``_id`` and camelCase timestamps"""
    _id = serializers.IntegerField(source='pk', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class AdminUserSerializer(DocumentSerializer):
    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['_id', 'username', 'name', 'phone', 'email', 'is_superuser', 'createdAt']

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


class AdminRegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta:
        model = User
        fields = ['username', 'phone', 'email', 'first_name', 'last_name', 'password']

    def validate_phone(self, value):
        if not value.isdigit() or len(value) != 10:
            raise serializers.ValidationError('Phone number must be exactly 10 digits')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(**validated_data, is_active=True, is_staff=True)
        user.set_password(password)
        user.save()
        return user


class AdminTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Phone + password login; the phone is the account's USERNAME_FIELD"""

    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return {
            'token': data['access'],
            'refresh': data['refresh'],
            'user': AdminUserSerializer(self.user).data,
        }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        return token


class AuditLogSerializer(serializers.ModelSerializer):
    user = AdminUserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'changes', 'ip_address', 'created_at']


class RechargeOptionSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    cashback = serializers.IntegerField(min_value=0, default=0)


class PlatformSettingSerializer(DocumentSerializer):
    """
    App-wide settings. ``links`` is merged into the stored links, so a PATCH
    may send only the keys it changes; ``rechargeOptions`` replaces the list.
    """
    links = serializers.DictField(child=serializers.CharField(max_length=500, allow_blank=True), required=False)
    rechargeOptions = serializers.ListField(source='recharge_options', child=RechargeOptionSerializer(), required=False)
    minAddMoney = serializers.IntegerField(source='min_add_money', min_value=1, required=False)
    maxRefers = serializers.IntegerField(source='max_refers', min_value=0, required=False)
    referReward = serializers.DecimalField(
        source='refer_reward', max_digits=10, decimal_places=2, min_value=0, required=False
    )
    deliveryTiming = serializers.CharField(source='delivery_timing', max_length=50, required=False)
    maxSubscriptionUpdateOrCancelTime = serializers.CharField(
        source='max_subscription_update_or_cancel_time', max_length=10, required=False
    )
    bottomImage = serializers.CharField(source='bottom_image', max_length=500, required=False, allow_blank=True)
    referImage = serializers.CharField(source='refer_image', max_length=500, required=False, allow_blank=True)
    referPageImageAttachment = serializers.CharField(
        source='refer_page_image_attachment', max_length=500, required=False, allow_blank=True
    )
    healthyBanner = serializers.CharField(source='healthy_banner', max_length=500, required=False, allow_blank=True)
    searchBackgroundImage = serializers.CharField(
        source='search_background_image', max_length=500, required=False, allow_blank=True
    )
    topBannerImage = serializers.CharField(
        source='top_banner_image', max_length=500, required=False, allow_blank=True
    )
    platformFees = serializers.DecimalField(
        source='platform_fees', max_digits=10, decimal_places=2, min_value=0, required=False
    )

    class Meta:
        model = PlatformSetting
        fields = ['_id', 'maintenance', 'links', 'rechargeOptions', 'minAddMoney', 'maxRefers', 'referReward',
                  'deliveryTiming', 'maxSubscriptionUpdateOrCancelTime', 'bottomImage', 'referImage',
                  'referPageImageAttachment', 'healthyBanner', 'searchBackgroundImage', 'topBannerImage',
                  'platformFees', 'createdAt', 'updatedAt']

    def validate_links(self, value):
        unknown = sorted(set(value) - set(PlatformSetting.LINK_KEYS))
        if unknown:
            raise serializers.ValidationError(f"Unknown links: {', '.join(unknown)}")
        value = {key: link.strip() for key, link in value.items()}
        website = value.get('website')
        if website and not WEBSITE_PATTERN.match(website):
            raise serializers.ValidationError('Invalid website URL')
        if website and len(website) > 255:
            raise serializers.ValidationError('Website URL must be 255 characters or fewer')
        current = self.instance.links if self.instance is not None else {}
        return {**current, **value}

    def validate_rechargeOptions(self, value):
        return [dict(option) for option in value]
