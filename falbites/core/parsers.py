import json

from rest_framework.exceptions import ValidationError


def request_payload(request, json_fields=()):
    """
    Flatten ``request.data`` into a plain dict.

    Multipart bodies cannot carry nested values, so list and object fields
    arrive JSON encoded; ``json_fields`` names the keys to decode. File parts
    are left out, views read them from ``request.FILES``.
    """
    data = request.data
    files = getattr(request, 'FILES', {}) or {}
    if hasattr(data, 'getlist'):
        payload = {key: data.get(key) for key in data.keys() if key not in files}
    else:
        payload = dict(data)

    for field in json_fields:
        value = payload.get(field)
        if isinstance(value, str):
            if not value.strip():
                payload[field] = []
                continue
            try:
                payload[field] = json.loads(value)
            except ValueError:
                raise ValidationError({field: 'Must be valid JSON'})
    return payload
