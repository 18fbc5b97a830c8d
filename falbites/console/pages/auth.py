import logging

from falbites.console.forms import AdminLoginForm, VendorLoginForm
from falbites.console.session import SessionError
from .base import PageController

logger = logging.getLogger(__name__)


class LoginPage(PageController):
    """Exchanges credentials for a token and starts the session"""

    def mount(self):
        self.mounted = True
        return self

    def credentials(self, envelope):
        """Return ``(token, profile)`` from a successful login response"""
        raise NotImplementedError

    def submit(self, data, files=None):
        self.form = self.form_class(data=data)
        if not self.form.is_valid():
            return False

        self.submitting = True
        self.banner = None
        try:
            envelope = self.call('POST', self.endpoint, **self.form.to_payload().request_kwargs())
        finally:
            self.submitting = False
        if envelope is None:
            return False

        token, profile = self.credentials(envelope)
        try:
            self.session.login(token, profile)
        except SessionError as exc:
            logger.warning(f"Login refused by session: {exc}")
            self.banner = str(exc)
            return False
        self.client.token = token
        self.notice = envelope.message
        return True


class AdminLoginPage(LoginPage):
    title = 'Admin login'
    endpoint = 'admin/login/'
    form_class = AdminLoginForm

    def credentials(self, envelope):
        return envelope.extra.get('token'), envelope.record


class VendorLoginPage(LoginPage):
    title = 'Vendor login'
    endpoint = 'vendors/login/'
    form_class = VendorLoginForm

    def credentials(self, envelope):
        data = envelope.record or {}
        return data.get('token'), data.get('vendor')
