import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from falbites.core.authentication import vendor_access_token
from falbites.core.permissions import IsPlatformAdmin
from falbites.core.responses import success_response, error_response, validation_error_response
from falbites.core.utils import create_audit_log
from .models import Vendor
from .serializers import VendorSerializer, VendorWriteSerializer, VendorLoginSerializer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'username', 'password', 'brandName')


def missing_fields(data, fields):
    return [field for field in fields if not str(data.get(field) or '').strip()]


@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def vendor_list_create(request):
    """List all vendors or create a new vendor"""
    if request.method == 'GET':
        vendors = Vendor.objects.all()
        return success_response(data=VendorSerializer(vendors, many=True).data)

    if missing_fields(request.data, REQUIRED_FIELDS):
        return error_response('All fields are required: name, username, password, brandName')
    if Vendor.objects.filter(username=request.data.get('username')).exists():
        return error_response('Username already exists')

    serializer = VendorWriteSerializer(data=request.data)
    if serializer.is_valid():
        vendor = serializer.save()
        logger.info(f"Vendor {vendor.pk} ({vendor.username}) created")
        return success_response(
            status.HTTP_201_CREATED,
            message='Vendor created',
            data=VendorSerializer(vendor).data,
        )
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def vendor_detail(request, pk):
    """Retrieve, update or delete a vendor"""
    vendor = Vendor.objects.filter(pk=pk).first()
    if vendor is None:
        return error_response('Vendor not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=VendorSerializer(vendor).data)
    elif request.method == 'PUT':
        serializer = VendorWriteSerializer(vendor, data=request.data, partial=True)
        if serializer.is_valid():
            vendor = serializer.save()
            logger.info(f"Vendor {vendor.pk} updated")
            return success_response(message='Vendor updated', data=VendorSerializer(vendor).data)
        return validation_error_response(serializer)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Vendor', vendor.pk, object_name=str(vendor))
        vendor.delete()
        logger.info(f"Vendor {pk} deleted")
        return success_response(message='Vendor deleted')


@api_view(['POST'])
@permission_classes([AllowAny])
def vendor_login(request):
    """Exchange vendor username + password for an access token"""
    serializer = VendorLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    username = serializer.validated_data['username']
    vendor = Vendor.objects.filter(username=username).first()
    if vendor is None or not vendor.check_password(serializer.validated_data['password']):
        logger.warning(f"Failed vendor login for {username}")
        return error_response('Invalid username or password', status.HTTP_401_UNAUTHORIZED)

    logger.info(f"Vendor login: {username}")
    return success_response(
        message='Login successful',
        data={
            'token': str(vendor_access_token(vendor)),
            'vendor': VendorSerializer(vendor).data,
        },
    )
