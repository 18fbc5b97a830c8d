import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from falbites.core.cache_utils import cached_list, DAILY_TIPS_CACHE_KEY
from falbites.core.parsers import request_payload
from falbites.core.permissions import IsPlatformAdmin
from falbites.core.responses import (
    success_response, error_response, validation_error_response, filter_error_response
)
from falbites.core.uploads import attach_image, images_from_request
from .filters import SubscriptionFilter, SubscriptionOrderFilter
from .models import Subscription, SubscriptionOrder, DeliveryDate, DailyTip
from .serializers import (
    SubscriptionSerializer, SubscriptionOrderSerializer, DeliveryStatusSerializer, DailyTipSerializer
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_JSON_FIELDS = ('types', 'franchiseIds', 'imageUrl')


def main_image_first(images, main_index):
    """Reorder uploaded images so the chosen main image comes first"""
    if main_index in (None, ''):
        main_index = 0
    try:
        index = int(main_index)
    except (TypeError, ValueError):
        raise ValidationError({'mainImageIndex': 'Invalid mainImageIndex'})
    if index < 0 or index >= len(images):
        raise ValidationError({'mainImageIndex': 'Invalid mainImageIndex'})
    return [images[index]] + images[:index] + images[index + 1:]


def subscription_payload(request, required_images=False):
    payload = request_payload(request, json_fields=SUBSCRIPTION_JSON_FIELDS)
    main_index = payload.pop('mainImageIndex', None)
    images = images_from_request(request)
    if images:
        payload['imageUrl'] = main_image_first(images, main_index)
    elif required_images and not payload.get('imageUrl'):
        raise ValidationError({'images': 'At least one image is required'})
    return payload


def subscription_queryset():
    return Subscription.objects.prefetch_related('types', 'franchises')


@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def subscription_list_create(request):
    """List all subscriptions or create a new subscription"""
    if request.method == 'GET':
        return success_response(data=SubscriptionSerializer(subscription_queryset(), many=True).data)

    serializer = SubscriptionSerializer(data=subscription_payload(request, required_images=True))
    if serializer.is_valid():
        subscription = serializer.save()
        logger.info(f"Subscription {subscription.pk} ({subscription.title}) created")
        # Create and update answer with a one-element list
        return success_response(
            status.HTTP_201_CREATED,
            data=[SubscriptionSerializer(subscription_queryset().get(pk=subscription.pk)).data],
        )
    return validation_error_response(serializer)


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def subscription_search(request):
    """Search subscriptions by ``q`` (title/description) and ``category``"""
    queryset = SubscriptionFilter(request.query_params, queryset=subscription_queryset()).qs
    return success_response(data=SubscriptionSerializer(queryset, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def subscription_detail(request, pk):
    """Retrieve (bare object), update or delete a subscription"""
    subscription = subscription_queryset().filter(pk=pk).first()
    if subscription is None:
        return error_response('Subscription not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(SubscriptionSerializer(subscription).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SubscriptionSerializer(subscription, data=subscription_payload(request), partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Subscription {pk} updated")
            return success_response(data=[SubscriptionSerializer(subscription_queryset().get(pk=pk)).data])
        return validation_error_response(serializer)
    else:  # DELETE
        subscription.delete()
        logger.info(f"Subscription {pk} deleted")
        return success_response(message='Subscription deleted successfully')


# Subscription order views
def order_queryset():
    return SubscriptionOrder.objects.select_related('user', 'subscription').prefetch_related(
        'delivery_dates__delivery_partner'
    )


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def subscription_order_list(request):
    """List subscription orders, optionally by user, plan or status"""
    filterset = SubscriptionOrderFilter(request.query_params, queryset=order_queryset())
    if not filterset.is_valid():
        return filter_error_response(filterset)
    return success_response(data=SubscriptionOrderSerializer(filterset.qs, many=True).data)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def subscription_order_detail(request, pk):
    """Retrieve, adjust (status, payment type, remaining days) or delete an order"""
    order = order_queryset().filter(pk=pk).first()
    if order is None:
        return error_response('Order not found', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(data=SubscriptionOrderSerializer(order).data)
    elif request.method == 'PATCH':
        serializer = SubscriptionOrderSerializer(order, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Subscription order {pk} updated: {dict(serializer.validated_data)}")
            return success_response(message='Order updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        order.delete()
        logger.info(f"Subscription order {pk} deleted")
        return success_response(message='Order deleted successfully')


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def subscription_order_delivery_status(request, pk):
    """Set the status of one scheduled delivery of an order"""
    order = SubscriptionOrder.objects.filter(pk=pk).first()
    if order is None:
        return error_response('Order not found', status.HTTP_404_NOT_FOUND, key='message')

    serializer = DeliveryStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)
    data = serializer.validated_data

    delivery = order.delivery_dates.filter(pk=data['deliveryId']).first()
    if delivery is None:
        return error_response('Delivery date not found', status.HTTP_404_NOT_FOUND, key='message')
    if delivery.status == DeliveryDate.NON_DELIVERY_DAY:
        return error_response('Cannot change the status of a non delivery day', key='message')

    old_status = delivery.status
    delivery.status = data['status']
    delivery.save(update_fields=['status', 'updated_at'])
    logger.info(f"Order {pk} delivery {delivery.pk} on {delivery.date}: {old_status} -> {delivery.status}")
    return success_response(
        message='Delivery status updated successfully',
        data=SubscriptionOrderSerializer(order_queryset().get(pk=pk)).data,
    )


# Daily tip views
@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def daily_tip_list_create(request):
    """List daily tips (cached for an hour) or create one"""
    if request.method == 'GET':
        data = cached_list(
            DAILY_TIPS_CACHE_KEY,
            lambda: list(DailyTipSerializer(DailyTip.objects.all(), many=True).data),
        )
        return success_response(data=data)

    payload = attach_image(request, request_payload(request), target='imageUrl')
    serializer = DailyTipSerializer(data=payload)
    if serializer.is_valid():
        tip = serializer.save()
        logger.info(f"Daily tip {tip.pk} created")
        return success_response(status.HTTP_201_CREATED, data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def daily_tip_detail(request, pk):
    """Retrieve, update or delete a daily tip"""
    tip = DailyTip.objects.filter(pk=pk).first()
    if tip is None:
        return error_response('Tip not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=DailyTipSerializer(tip).data)
    elif request.method == 'PATCH':
        payload = attach_image(request, request_payload(request), target='imageUrl')
        serializer = DailyTipSerializer(tip, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Daily tip {pk} updated")
            return success_response(data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        tip.delete()
        logger.info(f"Daily tip {pk} deleted")
        return success_response(message='Daily Tip deleted successfully')
