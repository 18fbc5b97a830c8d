import logging
from django.db import DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from falbites.core.responses import success_response, error_response
from .filters import ReviewFilter
from .models import Review
from .serializers import ReviewSerializer, ReviewDetailSerializer

logger = logging.getLogger(__name__)


def review_queryset():
    return Review.objects.select_related(
        'delivery_partner', 'subscription', 'user', 'franchise__assigned_manager'
    ).order_by('-date')


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def review_list_create(request):
    """List reviews (filtered by delivery partner / subscription) or create one"""
    if request.method == 'POST':
        return create_review(request)
    return get_reviews(request)


def create_review(request):
    serializer = ReviewSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Rejected review: {serializer.errors}")
        return error_response('Failed to create review', status.HTTP_500_INTERNAL_SERVER_ERROR, key='message')
    try:
        review = serializer.save()
    except DatabaseError:
        logger.exception("Failed to create review")
        return error_response('Failed to create review', status.HTTP_500_INTERNAL_SERVER_ERROR, key='message')

    logger.info(f"Review {review.pk} ({review.rating}/5) created for partner {review.delivery_partner_id}")
    return success_response(status.HTTP_201_CREATED, review=ReviewSerializer(review).data)


def get_reviews(request):
    filterset = ReviewFilter(request.query_params, queryset=review_queryset())
    if not filterset.is_valid():
        logger.warning(f"Rejected review filter {dict(request.query_params)}: {filterset.errors}")
        return error_response('Failed to fetch reviews', status.HTTP_500_INTERNAL_SERVER_ERROR, key='message')
    try:
        reviews = list(filterset.qs)
    except DatabaseError:
        logger.exception("Failed to fetch reviews")
        return error_response('Failed to fetch reviews', status.HTTP_500_INTERNAL_SERVER_ERROR, key='message')
    return success_response(reviews=ReviewDetailSerializer(reviews, many=True).data)


@api_view(['DELETE'])
@permission_classes([AllowAny])
def review_delete(request, pk):
    """Delete a review by id"""
    try:
        deleted, _ = Review.objects.filter(pk=pk).delete()
    except DatabaseError:
        logger.exception(f"Failed to delete review {pk}")
        return error_response('Failed to delete review', status.HTTP_500_INTERNAL_SERVER_ERROR, key='message')
    if not deleted:
        return error_response('Review not found', status.HTTP_404_NOT_FOUND, key='message')
    logger.info(f"Review {pk} deleted")
    return success_response(message='Review deleted')
