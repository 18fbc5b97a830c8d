"""
Console session: who is signed in, persisted under one local storage key.

The admin app keeps its record under ``userData`` and the vendor app under
``vendorData``. ``login`` is only valid while anonymous and ``logout`` only
while authenticated.
"""
import logging

logger = logging.getLogger(__name__)

ADMIN = 'admin'
VENDOR = 'vendor'
STORAGE_KEYS = {
    ADMIN: 'userData',
    VENDOR: 'vendorData',
}


class SessionError(Exception):
    pass


class Session:
    def __init__(self, app, storage):
        if app not in STORAGE_KEYS:
            raise SessionError(f"Unknown app '{app}'")
        self.app = app
        self.storage = storage
        self.storage_key = STORAGE_KEYS[app]
        self.token = None
        self.profile = None
        self.restore()

    @property
    def is_authenticated(self):
        return bool(self.token)

    def restore(self):
        """Load the persisted record, if any"""
        record = self.storage.get(self.storage_key)
        if isinstance(record, dict) and record.get('token'):
            self.token = record['token']
            self.profile = record.get('profile') or {}
        else:
            self.token = None
            self.profile = None
        return self.is_authenticated

    def login(self, token, profile):
        if self.is_authenticated:
            raise SessionError('Already logged in; log out first')
        if not token:
            raise SessionError('Cannot log in without a token')
        self.token = token
        self.profile = profile or {}
        self.storage.set(self.storage_key, {'token': token, 'profile': self.profile})
        logger.info(f"{self.app} session started for {self.display_name}")

    def logout(self):
        if not self.is_authenticated:
            raise SessionError('Not logged in')
        name = self.display_name
        self.token = None
        self.profile = None
        self.storage.remove(self.storage_key)
        logger.info(f"{self.app} session ended for {name}")

    @property
    def display_name(self):
        profile = self.profile or {}
        return profile.get('name') or profile.get('username') or profile.get('phone') or 'anonymous'
