"""
HTTP client used by every console controller.

Wraps a ``requests.Session``: adds the Bearer token, picks JSON or multipart
encoding, and turns every response into an ``Envelope``. Failures surface as
``ApiError`` carrying the server's own message when it sent one.
"""
import logging

import requests
from django.conf import settings

from .envelope import parse_envelope
from .tasks import RequestCancelled

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = 'Network error. Please check your connection.'
SERVER_ERROR_MESSAGE = 'Something went wrong. Please try again.'

__all__ = ['ApiClient', 'ApiError', 'RequestCancelled', 'NETWORK_ERROR_MESSAGE', 'SERVER_ERROR_MESSAGE']


class ApiError(Exception):
    def __init__(self, message, status=None, errors=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}

    def __str__(self):
        if self.status:
            return f"{self.status}: {self.message}"
        return self.message


class ApiClient:
    def __init__(self, base_url=None, token=None, session=None, timeout=None):
        base_url = base_url or settings.FALBITES_API_URL
        self.base_url = base_url.rstrip('/') + '/'
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.FALBITES_API_TIMEOUT

    def url(self, path):
        return self.base_url + path.lstrip('/')

    def headers(self):
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, method, path, params=None, json=None, data=None, files=None, key=None, cancel_token=None):
        """
        Send one request and return its ``Envelope``.

        Raises ``ApiError`` on transport failures and on ``success: false`` or
        4xx/5xx answers, and ``RequestCancelled`` when ``cancel_token`` was
        cancelled before the response could be used.
        """
        method = method.upper()
        url = self.url(path)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        kwargs = {'params': params, 'headers': self.headers(), 'timeout': self.timeout}
        if files:
            kwargs['data'] = data or {}
            kwargs['files'] = files
        elif json is not None:
            kwargs['json'] = json
        elif data is not None:
            kwargs['data'] = data

        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning(f"{method} {url} failed: {exc}")
            raise ApiError(NETWORK_ERROR_MESSAGE) from exc

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        try:
            body = response.json()
        except ValueError:
            body = None
        envelope = parse_envelope(body, response.status_code, key=key)
        logger.debug(f"{method} {url} -> {response.status_code}")

        if not envelope.ok:
            raise ApiError(envelope.message or SERVER_ERROR_MESSAGE, response.status_code, envelope.errors)
        return envelope

    def get(self, path, **kwargs):
        return self.request('GET', path, **kwargs)

    def post(self, path, **kwargs):
        return self.request('POST', path, **kwargs)

    def put(self, path, **kwargs):
        return self.request('PUT', path, **kwargs)

    def patch(self, path, **kwargs):
        return self.request('PATCH', path, **kwargs)

    def delete(self, path, **kwargs):
        return self.request('DELETE', path, **kwargs)
