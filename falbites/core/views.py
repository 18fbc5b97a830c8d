import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView
from .cache_utils import cached_list, SETTINGS_CACHE_KEY
from .models import AuditLog, PlatformSetting
from .parsers import request_payload
from .permissions import IsPlatformAdmin, IsPlatformAdminOrReadOnly, is_vendor
from .responses import success_response, error_response, validation_error_response
from .serializers import (
    AdminUserSerializer, AdminRegisterSerializer,
    AdminTokenObtainPairSerializer, AuditLogSerializer, PlatformSettingSerializer
)
from .stats import dashboard_stats
from .uploads import attach_image

logger = logging.getLogger(__name__)


class AdminLoginView(TokenObtainPairView):
    """Exchange phone + password for an access/refresh token pair"""
    serializer_class = AdminTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        logger.info(f"Admin login: {response.data['user']['username']}")
        response.data = {'success': True, 'message': 'Login successful', **response.data}
        return response


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def register(request):
    """Create another platform admin"""
    serializer = AdminRegisterSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"Admin {user.username} registered by {request.user}")
        return success_response(
            status.HTTP_201_CREATED,
            message='Admin registered',
            user=AdminUserSerializer(user).data,
        )
    return validation_error_response(serializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """Profile behind the current token (admin or vendor)"""
    if is_vendor(request.user):
        from falbites.vendors.serializers import VendorSerializer
        return success_response(kind='vendor', data=VendorSerializer(request.user.vendor).data)
    return success_response(kind='admin', data=AdminUserSerializer(request.user).data)


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def audit_log_list(request):
    """Most recent audit log entries, optionally filtered by action or model"""
    logs = AuditLog.objects.select_related('user')
    action = request.query_params.get('action')
    model_name = request.query_params.get('model_name')
    if action:
        logs = logs.filter(action=action)
    if model_name:
        logs = logs.filter(model_name=model_name)
    serializer = AuditLogSerializer(logs[:200], many=True)
    return success_response(data=serializer.data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsPlatformAdminOrReadOnly])
def platform_settings(request):
    """Read the app settings (cached) or patch them; images may be uploaded one by one"""
    if request.method == 'GET':
        data = cached_list(
            SETTINGS_CACHE_KEY,
            lambda: dict(PlatformSettingSerializer(PlatformSetting.load()).data),
        )
        return success_response(data=data)

    payload = request_payload(request, json_fields=('links', 'rechargeOptions'))
    for field in PlatformSetting.IMAGE_FIELDS:
        attach_image(request, payload, field=field)
    serializer = PlatformSettingSerializer(PlatformSetting.load(), data=payload, partial=True)
    if serializer.is_valid():
        serializer.save()
        logger.info(f"Settings updated by {request.user}: {', '.join(sorted(serializer.validated_data))}")
        return success_response(message='Settings updated successfully', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def dashboard_stats_view(request):
    """Home page figures, optionally for one franchise branch"""
    branch_id = request.query_params.get('branchId') or None
    if branch_id is not None:
        try:
            branch_id = int(branch_id)
        except ValueError:
            return error_response('branchId: Enter a whole number.', errors={'branchId': ['Enter a whole number.']})
    return success_response(**dashboard_stats(branch_id))
