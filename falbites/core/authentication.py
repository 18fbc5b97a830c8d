"""
JWT authentication for both account kinds.

Admin tokens carry the standard ``user_id`` claim. Vendor tokens are minted by
the vendor login endpoint with a ``vendor_id`` claim instead, and resolve to a
``VendorPrincipal`` rather than a ``User`` row.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import AccessToken

VENDOR_CLAIM = 'vendor_id'


class VendorPrincipal:
    """request.user stand-in for an authenticated vendor"""
    is_authenticated = True
    is_anonymous = False
    is_active = True
    is_staff = False
    is_superuser = False
    is_vendor = True

    def __init__(self, vendor):
        self.vendor = vendor
        self.pk = vendor.pk
        self.username = vendor.username

    def __str__(self):
        return f"vendor:{self.username}"


def vendor_access_token(vendor):
    token = AccessToken()
    token[VENDOR_CLAIM] = vendor.pk
    token['username'] = vendor.username
    return token


class AccountJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        vendor_id = validated_token.get(VENDOR_CLAIM)
        if vendor_id is None:
            return super().get_user(validated_token)

        from falbites.vendors.models import Vendor
        try:
            vendor = Vendor.objects.get(pk=vendor_id)
        except Vendor.DoesNotExist:
            raise AuthenticationFailed('Vendor not found', code='user_not_found')
        return VendorPrincipal(vendor)
