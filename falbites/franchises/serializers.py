from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from falbites.users.models import Customer
from .models import Franchise


class LocationSerializer(serializers.Serializer):
    locationName = serializers.CharField(source='location_name', required=False, allow_blank=True)
    lat = serializers.FloatField(source='latitude', required=False, allow_null=True)
    lang = serializers.FloatField(source='longitude', required=False, allow_null=True)


class PolygonPointSerializer(serializers.Serializer):
    lat = serializers.FloatField()
    lng = serializers.FloatField()


class ManagerSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    mobileNumber = serializers.CharField(source='mobile_number', read_only=True)

    class Meta:
        model = Customer
        fields = ['_id', 'name', 'email', 'mobileNumber']


class FranchiseSerializer(DocumentSerializer):
    cityName = serializers.CharField(source='city_name', max_length=100)
    branchName = serializers.CharField(source='branch_name', max_length=100)
    location = LocationSerializer(source='*', required=False)
    totalDeliveryRadius = serializers.FloatField(source='total_delivery_radius', min_value=0)
    freeDeliveryRadius = serializers.FloatField(source='free_delivery_radius', min_value=0)
    chargePerExtraKm = serializers.FloatField(source='charge_per_extra_km', min_value=0)
    polygonCoordinates = PolygonPointSerializer(source='polygon_coordinates', many=True, required=False)
    assignedManager = ManagerSummarySerializer(source='assigned_manager', read_only=True)
    assignedManagerId = serializers.PrimaryKeyRelatedField(
        source='assigned_manager', queryset=Customer.objects.filter(role='manager'),
        write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = Franchise
        fields = ['_id', 'name', 'cityName', 'branchName', 'location', 'totalDeliveryRadius',
                  'freeDeliveryRadius', 'chargePerExtraKm', 'polygonCoordinates',
                  'assignedManager', 'assignedManagerId', 'createdAt', 'updatedAt']

    def validate(self, attrs):
        free = attrs.get('free_delivery_radius', getattr(self.instance, 'free_delivery_radius', None))
        total = attrs.get('total_delivery_radius', getattr(self.instance, 'total_delivery_radius', None))
        if free is not None and total is not None and free > total:
            raise serializers.ValidationError({'freeDeliveryRadius': 'Free delivery radius cannot exceed the total delivery radius'})
        return attrs
