from falbites.console.forms import SettingsForm
from .base import PageController


class SettingsPage(PageController):
    """The single app-wide settings record"""
    title = 'Settings'
    endpoint = 'settings/'
    form_class = SettingsForm
    update_method = 'PATCH'
    allow_create = False

    def detail_path(self, entity_id):
        return self.endpoint

    @property
    def current(self):
        return self.items[0] if self.items else None

    def edit(self):
        self.open_modal(self.current or {})
        return self

    def save(self, data, files=None):
        """Patch the fields given; returns True when the server accepted them"""
        self.edit()
        return self.submit(data, files)

    def reconcile(self, envelope, editing):
        if envelope.record is None:
            self.fetch_list()
        else:
            self.items = [envelope.record]

    def set_maintenance(self, on):
        return self.save({'maintenance': bool(on)})
