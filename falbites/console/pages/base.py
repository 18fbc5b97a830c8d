"""
Generic CRUD page controller.

A controller owns one page's state: the fetched list, the search query, the
modal and the banner. It talks to the API through an ``ApiClient`` and never
lets an exception escape to its caller; failures end up in ``banner`` (and
``form.errors`` for validation). Every request is tied to the controller's
``CancelToken`` so that responses arriving after ``unmount()`` or after a
newer search are dropped.
"""
import logging

from django.conf import settings

from falbites.console.api import ApiError, RequestCancelled
from falbites.console.tasks import CancelToken, Debouncer

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = 'An unexpected error occurred. Please try again.'


def lookup(record, path):
    """Resolve a dotted path (``userID.name``) inside a nested record"""
    value = record
    for part in path.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


class PageController:
    title = ''
    endpoint = ''              # list/create path, e.g. 'vendors/'
    detail_endpoint = None     # defaults to '<endpoint><id>/'
    create_endpoint = None     # defaults to endpoint
    list_key = None            # payload key when not 'data'
    id_field = '_id'
    search_fields = ()         # client-side search over these (dotted) fields
    server_search = False
    search_endpoint = None
    search_param = 'q'
    form_class = None
    update_method = 'PUT'
    refetch_after_submit = False
    allow_create = True
    allow_update = True

    def __init__(self, client, session=None, debounce=None, clock=None):
        self.client = client
        self.session = session
        self.items = []
        self.query = ''
        self.loading = False
        self.submitting = False
        self.modal_open = False
        self.editing = None
        self.form = None
        self.banner = None
        self.notice = None
        self.mounted = False
        self.cancel_token = CancelToken()
        delay = settings.FALBITES_SEARCH_DEBOUNCE if debounce is None else debounce
        self.debouncer = Debouncer(delay, clock) if clock else Debouncer(delay)

    def __repr__(self):
        return f"<{self.__class__.__name__} items={len(self.items)} mounted={self.mounted}>"

    # Lifecycle

    def mount(self):
        self.mounted = True
        self.cancel_token = CancelToken()
        self.fetch_list()
        return self

    def unmount(self):
        self.mounted = False
        self.cancel_token.cancel()
        self.debouncer.cancel()

    # Paths

    def list_path(self):
        return self.endpoint

    def create_path(self):
        return self.create_endpoint or self.endpoint

    def detail_path(self, entity_id):
        if self.detail_endpoint:
            return self.detail_endpoint.format(id=entity_id)
        return f"{self.endpoint}{entity_id}/"

    def list_params(self):
        return None

    # Requests

    def _request(self, method, path, **kwargs):
        return self.client.request(method, path, cancel_token=self.cancel_token, **kwargs)

    def call(self, method, path, **kwargs):
        """
        Issue a request on behalf of the page. Returns the ``Envelope``, or
        None when the request failed (banner set) or was cancelled.
        """
        try:
            return self._request(method, path, **kwargs)
        except RequestCancelled:
            logger.debug(f"{self.__class__.__name__}: dropped response for {method} {path}")
        except ApiError as exc:
            logger.warning(f"{self.__class__.__name__}: {method} {path} failed: {exc}")
            self.banner = exc.message
            if self.form is not None and exc.errors:
                for field, messages in exc.errors.items():
                    if field in self.form.fields:
                        message = messages[0] if isinstance(messages, list) and messages else messages
                        self.form.add_error(field, str(message))
        except Exception:
            logger.exception(f"{self.__class__.__name__}: unexpected error during {method} {path}")
            self.banner = UNEXPECTED_ERROR_MESSAGE
        return None

    def dismiss_banner(self):
        self.banner = None

    # List

    def extract_items(self, envelope):
        return list(envelope.items)

    def after_fetch(self, envelope):
        """Hook for pages that read extra envelope keys"""

    def fetch_list(self, params=None):
        """Fetch the list; on failure the current items are kept and [] is returned"""
        self.loading = True
        try:
            envelope = self.call('GET', self.list_path(), params=params or self.list_params(), key=self.list_key)
        finally:
            self.loading = False
        if envelope is None:
            return []
        self.items = self.extract_items(envelope)
        self.after_fetch(envelope)
        return self.items

    def visible_items(self):
        """Items after client-side search; server-searched pages show items as fetched"""
        query = self.query.strip().lower()
        if self.server_search or not query:
            return list(self.items)
        return [item for item in self.items if self.matches(item, query)]

    def matches(self, item, query):
        for field in self.search_fields:
            value = lookup(item, field)
            if value is not None and query in str(value).lower():
                return True
        return False

    # Search

    def search(self, query):
        """
        Update the query. Client-side pages filter immediately and return the
        visible items; server-side pages schedule a debounced fetch that
        supersedes any pending one and return None.
        """
        self.query = query or ''
        if not self.server_search:
            return self.visible_items()
        self.debouncer.schedule(self.run_search, self.query)
        return None

    def tick(self):
        return self.debouncer.tick()

    def flush(self):
        return self.debouncer.flush()

    def search_params(self, query):
        return {self.search_param: query}

    def wants_search(self, query):
        return bool(query.strip())

    def run_search(self, query):
        # A newer search makes any in-flight one stale
        self.cancel_token.cancel()
        self.cancel_token = CancelToken()
        if not self.wants_search(query):
            return self.fetch_list()

        self.loading = True
        try:
            envelope = self.call(
                'GET', self.search_endpoint or self.list_path(), params=self.search_params(query), key=self.list_key
            )
        finally:
            self.loading = False
        if envelope is None:
            return []
        self.items = self.extract_items(envelope)
        self.after_fetch(envelope)
        return self.items

    # Modal

    def open_modal(self, entity=None):
        self.modal_open = True
        self.editing = entity
        self.form = None
        self.banner = None

    def close_modal(self):
        self.modal_open = False
        self.editing = None
        self.form = None

    # Writes

    def entity_id(self, entity):
        return entity.get(self.id_field) if isinstance(entity, dict) else entity

    def build_form(self, data, files=None):
        return self.form_class(data=data, files=files, instance=self.editing)

    def submit(self, data, files=None):
        """
        Validate and send the create/update form. Returns True on success,
        after which the modal is closed and the list reconciled. On failure
        the modal stays open and ``submitting`` is reset.
        """
        if self.editing is None and not self.allow_create:
            self.banner = f"{self.title or 'This page'} does not support creating records"
            return False
        if self.editing is not None and not self.allow_update:
            self.banner = f"{self.title or 'This page'} does not support editing records"
            return False
        if not self.modal_open:
            self.open_modal(self.editing)
        self.form = self.build_form(data, files)
        if not self.form.is_valid():
            logger.debug(f"{self.__class__.__name__}: form invalid {self.form.errors.as_json()}")
            return False

        payload = self.form.to_payload()
        editing = self.editing
        self.submitting = True
        self.banner = None
        try:
            if editing is not None:
                path = self.detail_path(self.entity_id(editing))
                envelope = self.call(self.update_method, path, key=self.list_key, **payload.request_kwargs())
            else:
                envelope = self.call('POST', self.create_path(), key=self.list_key, **payload.request_kwargs())
        finally:
            self.submitting = False
        if envelope is None:
            return False

        self.notice = envelope.message
        self.close_modal()
        self.reconcile(envelope, editing)
        return True

    def reconcile(self, envelope, editing):
        """Fold a create/update response into the displayed list"""
        record = envelope.record
        if self.refetch_after_submit or record is None:
            self.fetch_list()
        elif editing is not None:
            self.replace_item(record)
        else:
            self.items.insert(0, record)

    def replace_item(self, record):
        record_id = str(self.entity_id(record))
        self.items = [
            {**item, **record} if str(self.entity_id(item)) == record_id else item
            for item in self.items
        ]

    def delete(self, entity_id):
        """Delete one record; on success exactly that id leaves the list"""
        envelope = self.call('DELETE', self.detail_path(entity_id))
        if envelope is None:
            return False
        self.notice = envelope.message
        self.remove_item(entity_id)
        return True

    def remove_item(self, entity_id):
        self.items = [item for item in self.items if str(self.entity_id(item)) != str(entity_id)]

    def action(self, method, path, form_class=None, data=None, files=None):
        """
        Run a one-off action (status change, wallet credit...) with optional
        form validation. Returns the ``Envelope`` or None.
        """
        kwargs = {}
        if form_class is not None:
            form = form_class(data=data, files=files)
            if not form.is_valid():
                self.form = form
                return None
            kwargs = form.to_payload().request_kwargs()
        elif data is not None:
            kwargs = {'json': data}
        envelope = self.call(method, path, **kwargs)
        if envelope is not None:
            self.notice = envelope.message
        return envelope
