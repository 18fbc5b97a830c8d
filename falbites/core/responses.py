"""
Response envelope helpers.

Every endpoint answers with a JSON object carrying a boolean ``success``. The
payload key differs per resource (``data``, ``review``, ``locations``...), so
views pass it explicitly.
"""
from rest_framework import status
from rest_framework.response import Response


def success_response(status_code=status.HTTP_200_OK, message=None, **payload):
    """Build ``{"success": true, ...payload}`` with an optional message."""
    body = {'success': True}
    if message:
        body['message'] = message
    body.update(payload)
    return Response(body, status=status_code)


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST, key='error', errors=None):
    """Build ``{"success": false, <key>: message}``."""
    body = {'success': False, key: message}
    if errors:
        body['errors'] = errors
    return Response(body, status=status_code)


def first_error(errors):
    """Return the first human readable message from a DRF error structure."""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error(value)
            if message is None:
                continue
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
        return None
    if isinstance(errors, (list, tuple)):
        for value in errors:
            message = first_error(value)
            if message is not None:
                return message
        return None
    return str(errors)


def validation_error_response(serializer):
    """400 envelope for a serializer that failed ``is_valid()``."""
    return error_response(first_error(serializer.errors) or 'Invalid input', errors=serializer.errors)


def filter_error_response(filterset):
    """400 envelope for a FilterSet whose query parameters did not validate."""
    errors = {
        field: [item['message'] for item in messages]
        for field, messages in filterset.errors.get_json_data().items()
    }
    return error_response(first_error(errors) or 'Invalid filter', errors=errors)
