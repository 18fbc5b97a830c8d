"""
Image uploads for the multipart endpoints.

Files are stored under MEDIA_ROOT as ``<millis>-<original name>`` (spaces
replaced by underscores) and exposed as an absolute URL built from
SERVER_IMAGE_URL.
"""
import logging
import os
import time

from django.conf import settings
from django.core.files.storage import default_storage
from PIL import Image, UnidentifiedImageError
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def storage_name(filename):
    base = os.path.basename(filename or 'upload').replace(' ', '_')
    return f"{int(time.time() * 1000)}-{base}"


def validate_image(upload):
    """Reject files that are not small jpeg/png/gif images."""
    ext = os.path.splitext(upload.name or '')[1].lower().lstrip('.')
    allowed = settings.UPLOAD_ALLOWED_EXTENSIONS
    if ext not in allowed:
        raise ValidationError({'image': f"Only image files are allowed ({', '.join(allowed)})"})
    if upload.size > settings.UPLOAD_MAX_BYTES:
        raise ValidationError({'image': 'Image must be 5 MB or smaller'})

    try:
        image = Image.open(upload)
        image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError({'image': 'Uploaded file is not a valid image'})
    finally:
        upload.seek(0)


def save_image(upload):
    """Validate and store an uploaded image, returning its public URL."""
    validate_image(upload)
    path = default_storage.save(storage_name(upload.name), upload)
    url = f"{settings.SERVER_IMAGE_URL}{settings.MEDIA_URL}{path}"
    logger.info(f"Stored upload {upload.name} as {path}")
    return url


def image_from_request(request, field='image', required=False):
    """Save ``request.FILES[field]`` if present; returns the URL or None."""
    upload = request.FILES.get(field)
    if upload is None:
        if required:
            raise ValidationError({field: 'Image is required'})
        return None
    return save_image(upload)


def images_from_request(request, field='images'):
    return [save_image(upload) for upload in request.FILES.getlist(field)]


def attach_image(request, payload, field='image', target=None, required=False):
    """
    Store ``request.FILES[field]`` and put its URL into ``payload[target]``.

    An already-hosted URL sent as a plain form value is kept as is; ``required``
    only fails when neither is present.
    """
    target = target or field
    url = image_from_request(request, field)
    if url:
        payload[target] = url
    elif required and not payload.get(target):
        raise ValidationError({field: 'Image is required'})
    return payload
