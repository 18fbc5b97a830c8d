from rest_framework.permissions import BasePermission, SAFE_METHODS


def is_vendor(user):
    return bool(getattr(user, 'is_vendor', False))


class IsPlatformAdmin(BasePermission):
    """Authenticated admin account (not a vendor token)"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and not is_vendor(user))


class IsAdminOrVendorReadOnly(BasePermission):
    """Admins get full access; vendors may only read"""
    message = 'Vendors have read-only access to this resource'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if is_vendor(user):
            return request.method in SAFE_METHODS
        return True


class IsPlatformAdminOrReadOnly(IsPlatformAdmin):
    """Anyone may read; only admins may write"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)
