from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from .models import Vendor


class VendorSerializer(DocumentSerializer):
    brandName = serializers.CharField(source='brand_name', read_only=True)

    class Meta:
        model = Vendor
        fields = ['_id', 'name', 'username', 'brandName', 'createdAt', 'updatedAt']


class VendorWriteSerializer(serializers.ModelSerializer):
    """Create/update payload; the password is optional on update"""
    brandName = serializers.CharField(source='brand_name', max_length=100)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = Vendor
        fields = ['name', 'username', 'password', 'brandName']
        extra_kwargs = {
            'username': {'validators': []},
        }

    def validate_username(self, value):
        existing = Vendor.objects.filter(username=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError('Username already exists')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        vendor = Vendor(**validated_data)
        vendor.set_password(password)
        vendor.save()
        return vendor

    def update(self, instance, validated_data):
        password = validated_data.pop('password', '')
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class VendorLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
