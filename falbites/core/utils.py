"""Utility functions for audit logging"""
import logging

from .models import AuditLog, User

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, object_name=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP)
        action: Action type (create, update, delete, payout, wallet_credit...)
        model_name: Name of the model being acted upon
        object_id: ID of the object
        changes: Dictionary of changes made
        object_name: Human-readable name of the object
    """
    if not action or not model_name or object_id is None:
        logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    # Vendor principals are not admin rows; only admins are linked
    actor = getattr(request, 'user', None) if request else None
    if not isinstance(actor, User):
        actor = None

    return AuditLog.objects.create(
        user=actor,
        action=action,
        model_name=model_name,
        object_id=str(object_id),
        object_name=object_name,
        changes=changes or {},
        ip_address=get_client_ip(request) if request else None,
    )
