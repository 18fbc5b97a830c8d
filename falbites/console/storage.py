"""
Local storage for the console: a small JSON document on disk, the
counterpart of the browser's ``localStorage``.
"""
import json
import logging
import os
import tempfile

from django.conf import settings

logger = logging.getLogger(__name__)


class LocalStorage:
    def __init__(self, path=None):
        self.path = path or os.path.join(settings.FALBITES_CONSOLE_HOME, 'storage.json')

    def _load(self):
        try:
            with open(self.path, encoding='utf-8') as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning(f"Ignoring unreadable console storage at {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data):
        directory = os.path.dirname(self.path) or '.'
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError):
            os.unlink(tmp_path)
            raise

    def get(self, key, default=None):
        return self._load().get(key, default)

    def set(self, key, value):
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key):
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
