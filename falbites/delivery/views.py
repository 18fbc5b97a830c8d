import logging
from django.db import transaction
from django.db.models import F
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from falbites.core.parsers import request_payload
from falbites.core.permissions import IsPlatformAdmin
from falbites.core.responses import (
    success_response, error_response, validation_error_response, filter_error_response
)
from falbites.core.uploads import attach_image
from falbites.core.utils import create_audit_log
from .filters import AttendanceFilter
from .models import DeliveryPartner, PayoutTransaction, BoxReview, BulkDelivery, UnavailableLocation, Attendance
from .serializers import (
    DeliveryPartnerSerializer, OnboardingStatusSerializer,
    PayoutRequestSerializer, PayoutTransactionSerializer, PayoutHistorySerializer,
    BoxReviewSerializer, BulkDeliverySerializer, UnavailableLocationSerializer,
    AttendanceSerializer, MarkAttendanceSerializer
)
from .utils import generate_transaction_id

logger = logging.getLogger(__name__)


def partner_queryset():
    return DeliveryPartner.objects.select_related('assigned_branch')


# Delivery partner views
@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def delivery_partner_list(request):
    """List delivery partners, optionally by onboarding status"""
    queryset = partner_queryset()
    onboarding_status = request.query_params.get('onboardingStatus')
    if onboarding_status:
        queryset = queryset.filter(onboarding_status=onboarding_status)
    return success_response(data=DeliveryPartnerSerializer(queryset, many=True).data)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def delivery_partner_detail(request, pk):
    """Retrieve, update or delete a delivery partner"""
    partner = partner_queryset().filter(pk=pk).first()
    if partner is None:
        return error_response('Delivery Partner not found.', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(data=DeliveryPartnerSerializer(partner).data)
    elif request.method == 'PATCH':
        serializer = DeliveryPartnerSerializer(partner, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Delivery partner {pk} updated")
            return success_response(message='Delivery Partner updated.', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        create_audit_log(request, 'delete', 'DeliveryPartner', partner.pk, object_name=str(partner))
        partner.delete()
        logger.info(f"Delivery partner {pk} deleted")
        return success_response(message='Delivery Partner deleted.')


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def change_onboarding_status(request, pk):
    """Approve or reject a delivery partner's onboarding"""
    partner = DeliveryPartner.objects.filter(pk=pk).first()
    if partner is None:
        return error_response('Delivery Partner not found.', status.HTTP_404_NOT_FOUND, key='message')

    serializer = OnboardingStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    old_status = partner.onboarding_status
    partner.onboarding_status = serializer.validated_data['onboardingStatus']
    partner.save(update_fields=['onboarding_status', 'updated_at'])
    create_audit_log(
        request, 'status_change', 'DeliveryPartner', partner.pk,
        changes={'onboardingStatus': [old_status, partner.onboarding_status]},
        object_name=str(partner),
    )
    logger.info(f"Delivery partner {pk} onboarding status {old_status} -> {partner.onboarding_status}")
    return success_response(
        message='Delivery Partner onboarding status updated.',
        onboardingStatus=partner.onboarding_status,
    )


# Payout views
@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def payout_create(request):
    """Pay a delivery partner out of their wallet"""
    serializer = PayoutRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)
    data = serializer.validated_data

    with transaction.atomic():
        partner = DeliveryPartner.objects.select_for_update().filter(pk=data['deliveryPartnerId']).first()
        if partner is None:
            return error_response('Delivery Partner not found.', status.HTTP_404_NOT_FOUND, key='message')
        if partner.wallet < data['amount']:
            logger.warning(f"Payout of {data['amount']} refused for partner {partner.pk}: wallet {partner.wallet}")
            return error_response('Insufficient wallet balance.', key='message')

        DeliveryPartner.objects.filter(pk=partner.pk).update(wallet=F('wallet') - data['amount'])
        payout = PayoutTransaction.objects.create(
            transaction_id=generate_transaction_id(),
            delivery_partner=partner,
            month_name=data['monthName'],
            date=data['date'],
            amount=data['amount'],
        )

    create_audit_log(
        request, 'payout', 'DeliveryPartner', partner.pk,
        changes={'amount': str(payout.amount), 'transactionId': payout.transaction_id},
        object_name=str(partner),
    )
    logger.info(f"Payout {payout.transaction_id} of {payout.amount} to partner {partner.pk}")
    return success_response(
        status.HTTP_201_CREATED,
        message='Payout successful.',
        data=PayoutTransactionSerializer(payout).data,
    )


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def payout_history(request, partner_id):
    """A delivery partner's payouts, newest date first"""
    payouts = PayoutTransaction.objects.filter(delivery_partner_id=partner_id).order_by('-date', '-created_at')
    return success_response(data=PayoutHistorySerializer(payouts, many=True).data)


# Box review views
@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def box_review_list(request):
    """All box reviews as a bare array with order and partner populated"""
    reviews = BoxReview.objects.select_related(
        'order__user', 'partner__assigned_branch'
    )
    return Response(BoxReviewSerializer(reviews, many=True).data)


@api_view(['DELETE'])
@permission_classes([IsPlatformAdmin])
def box_review_delete(request, pk):
    review = BoxReview.objects.filter(pk=pk).first()
    if review is None:
        return error_response('Box review not found', status.HTTP_404_NOT_FOUND, key='message')
    review.delete()
    logger.info(f"Box review {pk} deleted")
    return success_response(message='Box review deleted successfully')


# Bulk delivery views
@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def bulk_delivery_list_create(request):
    """List bulk deliveries newest first or record a new one (image required)"""
    if request.method == 'GET':
        deliveries = BulkDelivery.objects.order_by('-created_at')
        return success_response(data=BulkDeliverySerializer(deliveries, many=True).data)

    payload = attach_image(request, request_payload(request), target='imageUrl', required=True)
    serializer = BulkDeliverySerializer(data=payload)
    if serializer.is_valid():
        delivery = serializer.save()
        logger.info(f"Bulk delivery {delivery.pk} for {delivery.name} created")
        return success_response(status.HTTP_201_CREATED, message='Bulk delivery entry created', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def bulk_delivery_detail(request, pk):
    """Retrieve, update or delete a bulk delivery"""
    delivery = BulkDelivery.objects.filter(pk=pk).first()
    if delivery is None:
        return error_response('Bulk delivery entry not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=BulkDeliverySerializer(delivery).data)
    elif request.method == 'PUT':
        payload = attach_image(request, request_payload(request), target='imageUrl')
        serializer = BulkDeliverySerializer(delivery, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Bulk delivery {pk} updated")
            return success_response(message='Bulk delivery entry updated', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        delivery.delete()
        logger.info(f"Bulk delivery {pk} deleted")
        return success_response(message='Bulk delivery entry deleted successfully')


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def bulk_delivery_status(request, pk):
    """Move a bulk delivery to pending, delivered or cancelled"""
    new_status = request.data.get('status')
    allowed = [choice for choice, _ in BulkDelivery.STATUS_CHOICES]
    if new_status not in allowed:
        return error_response(f"Invalid status. Allowed: {', '.join(allowed)}")

    delivery = BulkDelivery.objects.filter(pk=pk).first()
    if delivery is None:
        return error_response('Entry not found', status.HTTP_404_NOT_FOUND)

    delivery.status = new_status
    delivery.save(update_fields=['status', 'updated_at'])
    logger.info(f"Bulk delivery {pk} status set to {new_status}")
    return success_response(message=f"Status updated to {new_status}", data=BulkDeliverySerializer(delivery).data)


# Unavailable location views
@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def unavailable_location_list_create(request):
    """List unavailable locations newest first or add one"""
    if request.method == 'GET':
        locations = UnavailableLocation.objects.select_related('added_by')
        return success_response(locations=UnavailableLocationSerializer(locations, many=True).data)

    serializer = UnavailableLocationSerializer(data=request.data)
    if serializer.is_valid():
        location = serializer.save()
        logger.info(f"Unavailable location {location.pk} ({location}) added")
        return success_response(status.HTTP_201_CREATED, location=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def unavailable_location_detail(request, pk):
    """Retrieve, update or delete an unavailable location"""
    location = UnavailableLocation.objects.select_related('added_by').filter(pk=pk).first()
    if location is None:
        return error_response('Location not found', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(location=UnavailableLocationSerializer(location).data)
    elif request.method == 'PUT':
        serializer = UnavailableLocationSerializer(location, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Unavailable location {pk} updated")
            return success_response(location=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        location.delete()
        logger.info(f"Unavailable location {pk} deleted")
        return success_response(message='Location deleted successfully')


# Attendance views
@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def attendance_list(request):
    """Attendance records newest date first, optionally by date, status or partner"""
    queryset = Attendance.objects.select_related('partner__assigned_branch')
    filterset = AttendanceFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return filter_error_response(filterset)
    return success_response(
        message='Attendance records fetched successfully.',
        data=AttendanceSerializer(filterset.qs, many=True).data,
    )


@api_view(['PUT'])
@permission_classes([IsPlatformAdmin])
def mark_attendance(request):
    """Set the status of a partner's existing attendance record for one day"""
    serializer = MarkAttendanceSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)
    data = serializer.validated_data

    record = Attendance.objects.select_related('partner__assigned_branch').filter(
        partner_id=data['id'], date=data['date']
    ).first()
    if record is None:
        return error_response(
            'No attendance record found for the given date.', status.HTTP_404_NOT_FOUND, key='message'
        )

    old_status = record.status
    record.status = data['status']
    record.save(update_fields=['status', 'updated_at'])
    logger.info(f"Attendance of partner {record.partner_id} on {record.date}: {old_status} -> {record.status}")
    return success_response(message='Attendance status updated successfully.', data=AttendanceSerializer(record).data)
