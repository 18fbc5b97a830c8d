"""DRF exception handler that wraps every error in the response envelope"""
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .responses import first_error

logger = logging.getLogger(__name__)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown view'

    if response is None:
        if isinstance(exc, DatabaseError):
            logger.exception(f"Database error in {view_name}: {exc}")
            return Response(
                {'success': False, 'error': 'Internal server error'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return None

    data = response.data
    if isinstance(data, dict) and 'detail' in data and len(data) <= 2:
        message = str(data['detail'])
        errors = None
    else:
        message = first_error(data) or 'Request failed'
        errors = data

    if response.status_code >= 500:
        logger.error(f"{view_name} failed with {response.status_code}: {message}")
    else:
        logger.warning(f"{view_name} rejected request with {response.status_code}: {message}")

    body = {'success': False, 'error': message}
    if errors:
        body['errors'] = errors
    response.data = body
    return response
