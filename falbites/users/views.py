import logging
from django.db import transaction
from django.db.models import F
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from falbites.core.pagination import positive_int
from falbites.core.permissions import IsPlatformAdmin
from falbites.core.responses import success_response, error_response, validation_error_response
from falbites.core.utils import create_audit_log
from falbites.franchises.models import Franchise
from falbites.subscriptions.models import SubscriptionOrder
from .models import Customer, WalletTransaction
from .serializers import (
    CustomerSerializer, CustomerListSerializer,
    ManagerCreateSerializer, AddBalanceSerializer
)
from .utils import generate_refer_code, customer_tag

logger = logging.getLogger(__name__)


def latest_orders_by_customer():
    """Map customer id -> that customer's most recent subscription order"""
    latest = {}
    orders = SubscriptionOrder.objects.only(
        'user_id', 'payment_type', 'remaining_days', 'created_at'
    ).order_by('user_id', '-created_at', '-pk')
    for order in orders:
        latest.setdefault(order.user_id, order)
    return latest


def find_customer(pk):
    return Customer.objects.select_related('assigned_franchise').filter(pk=pk).first()


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def user_list(request):
    """List customers newest first, tagged by their latest subscription order"""
    limit = positive_int(request.query_params.get('limit'), 2000)
    customers = Customer.objects.select_related('assigned_franchise')[:limit]

    latest = latest_orders_by_customer()
    tags = {customer.pk: customer_tag(latest.get(customer.pk)) for customer in customers}
    total_customers = sum(1 for order in latest.values() if order.payment_type == 'ONLINE')

    serializer = CustomerListSerializer(customers, many=True, context={'tags': tags})
    return success_response(
        totalUsers=Customer.objects.count(),
        totalCustomer=total_customers,
        data=serializer.data,
    )


@api_view(['GET', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def user_detail(request, pk):
    """Retrieve or delete a customer"""
    customer = find_customer(pk)
    if customer is None:
        return error_response('User not found.', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(data=CustomerSerializer(customer).data)

    create_audit_log(request, 'delete', 'Customer', customer.pk, object_name=str(customer))
    customer.delete()
    logger.info(f"Customer {pk} deleted by {request.user}")
    return success_response(message='User deleted successfully.')


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def toggle_block(request, pk):
    """Flip a customer's blocked flag"""
    customer = find_customer(pk)
    if customer is None:
        return error_response('User not found.', status.HTTP_404_NOT_FOUND, key='message')

    customer.blocked = not customer.blocked
    customer.save(update_fields=['blocked', 'updated_at'])
    create_audit_log(request, 'block_toggle', 'Customer', customer.pk,
                     changes={'blocked': customer.blocked}, object_name=str(customer))
    state = 'blocked' if customer.blocked else 'unblocked'
    logger.info(f"Customer {customer.pk} {state}")
    return success_response(
        message=f"User {state} successfully.",
        data=CustomerSerializer(customer).data,
    )


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def add_balance(request):
    """Credit a customer's wallet and record the transaction"""
    serializer = AddBalanceSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    data = serializer.validated_data
    amount = data['amount']
    with transaction.atomic():
        updated = Customer.objects.filter(pk=data['userId']).update(wallet=F('wallet') + amount)
        if not updated:
            return error_response('User not found.', status.HTTP_404_NOT_FOUND, key='message')
        WalletTransaction.objects.create(
            customer_id=data['userId'],
            amount=amount,
            type='credit',
            reason=data['reason'],
        )

    customer = find_customer(data['userId'])
    create_audit_log(request, 'wallet_credit', 'Customer', customer.pk,
                     changes={'amount': str(amount), 'reason': data['reason']}, object_name=str(customer))
    logger.info(f"Credited {amount} to customer {customer.pk}")
    return success_response(
        message=f"₹{amount} added to user's wallet successfully.",
        data=CustomerSerializer(customer).data,
    )


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def assign_franchise(request, pk):
    """Attach a customer to a franchise"""
    franchise_id = request.data.get('franchiseId')
    if not franchise_id:
        return error_response('userId and franchiseId are required.')

    customer = find_customer(pk)
    if customer is None:
        return error_response('User not found.', status.HTTP_404_NOT_FOUND)
    franchise = Franchise.objects.filter(pk=franchise_id).first()
    if franchise is None:
        return error_response('Franchise not found.', status.HTTP_404_NOT_FOUND)

    customer.assigned_franchise = franchise
    customer.save(update_fields=['assigned_franchise', 'updated_at'])
    return success_response(
        message='Franchise assigned to user successfully.',
        data=CustomerSerializer(customer).data,
    )


# Manager views
@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def manager_create(request):
    """Register a mobile number as a franchise manager"""
    serializer = ManagerCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    mobile_number = serializer.validated_data['mobileNumber']
    existing = Customer.objects.filter(mobile_number=mobile_number).first()
    if existing is not None:
        if existing.role == 'manager':
            return error_response('Manager already exists with this mobile number.')
        return error_response(f"This mobile number is already registered as a {existing.role}.")

    manager = Customer.objects.create(
        mobile_number=mobile_number,
        name=serializer.validated_data['name'],
        role='manager',
        refer_code=generate_refer_code(),
    )
    logger.info(f"Manager {manager.pk} created for {mobile_number}")
    return success_response(
        status.HTTP_201_CREATED,
        message='Manager created successfully.',
        data=CustomerSerializer(manager).data,
    )


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def manager_list(request):
    managers = Customer.objects.filter(role='manager').select_related('assigned_franchise')
    return success_response(data=CustomerSerializer(managers, many=True).data)


@api_view(['DELETE'])
@permission_classes([IsPlatformAdmin])
def manager_delete(request, pk):
    manager = Customer.objects.filter(pk=pk, role='manager').first()
    if manager is None:
        return error_response('Manager not found', status.HTTP_404_NOT_FOUND)

    create_audit_log(request, 'delete', 'Manager', manager.pk, object_name=str(manager))
    manager.delete()
    logger.info(f"Manager {pk} deleted by {request.user}")
    return success_response(message='Manager deleted successfully!')
