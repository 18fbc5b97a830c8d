"""
Normalizes the API's response bodies into one shape.

Resources answer in several ways: ``{success, data}``, named payload keys
(``review``, ``reviews``, ``location``, ``locations``), ``{data}`` without a
success flag, bare arrays and bare objects. Controllers only ever see an
``Envelope``.
"""
PAYLOAD_KEYS = ('data', 'reviews', 'review', 'locations', 'location', 'user')
MESSAGE_KEYS = ('message', 'error')


class Envelope:
    def __init__(self, ok, status=None, data=None, message=None, errors=None, pagination=None, extra=None):
        self.ok = ok
        self.status = status
        self.data = data
        self.message = message
        self.errors = errors or {}
        self.pagination = pagination
        self.extra = extra or {}

    def __repr__(self):
        return f"<Envelope ok={self.ok} status={self.status} message={self.message!r}>"

    @property
    def items(self):
        """Payload as a list of records"""
        if isinstance(self.data, list):
            return self.data
        if isinstance(self.data, dict):
            return [self.data]
        return []

    @property
    def record(self):
        """Payload as a single record (first element of a list payload)"""
        if isinstance(self.data, dict):
            return self.data
        if isinstance(self.data, list) and self.data:
            return self.data[0]
        return None


def parse_envelope(body, status=200, key=None):
    """
    Build an ``Envelope`` from a decoded JSON body.

    ``key`` names the payload key when the resource uses a non standard one;
    otherwise the first known payload key present wins, and a dict without
    any of them is taken as a bare object.
    """
    http_ok = 200 <= status < 300

    if isinstance(body, list):
        return Envelope(http_ok, status, data=body)
    if not isinstance(body, dict):
        return Envelope(http_ok, status)

    ok = bool(body.get('success', http_ok)) and http_ok
    message = next((body[k] for k in MESSAGE_KEYS if isinstance(body.get(k), str)), None)

    payload_key = key if key in body else next((k for k in PAYLOAD_KEYS if k in body), None)
    if payload_key is not None:
        data = body[payload_key]
    elif 'success' not in body and http_ok:
        data = body
        payload_key = None
    else:
        data = None

    reserved = {'success', 'pagination', 'errors', payload_key, *MESSAGE_KEYS}
    extra = {k: v for k, v in body.items() if k not in reserved} if data is not body else {}

    return Envelope(
        ok,
        status,
        data=data,
        message=message,
        errors=body.get('errors') if isinstance(body.get('errors'), dict) else None,
        pagination=body.get('pagination'),
        extra=extra,
    )
