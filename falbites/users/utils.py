import secrets

from .models import Customer


def generate_refer_code():
    """Eight hex characters, unique across customers"""
    while True:
        code = secrets.token_hex(4).upper()
        if not Customer.objects.filter(refer_code=code).exists():
            return code


def customer_tag(order):
    """
    Classify a customer by their latest subscription order.

    No order -> "user"; no days left -> "expired"; prepaid online -> "customer";
    anything else is the lowercased payment type (e.g. "cod").
    """
    if order is None:
        return 'user'
    if order.remaining_days < 1:
        return 'expired'
    if order.payment_type == 'ONLINE':
        return 'customer'
    return order.payment_type.lower() if order.payment_type else 'user'
