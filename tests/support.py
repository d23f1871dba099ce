"""
Shared fixtures: a throwaway SQLite file per test case.
"""
import os
import tempfile

from garage_booking.config import Settings
from garage_booking.main import create_app, prepare_database
from garage_booking.routers import EXTENSION_KEY


def make_settings(directory, **overrides):
    values = {
        "database_url": "sqlite:///" + os.path.join(directory, "garage.db"),
        "database_user": "garage",
        "secret_key": "test-secret-key",
        "jwt_secret_key": "test-jwt-secret-key-that-is-long-enough",
    }
    values.update(overrides)
    return Settings(**values)


class AppTestMixin:
    """Builds a testing app over a fresh database for every test."""

    settings_overrides = {}

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.settings = make_settings(self.tmpdir.name, **self.settings_overrides)
        self.app = create_app(self.settings, testing=True)
        prepare_database(self.app)
        self.service = self.app.extensions[EXTENSION_KEY]
        self.repository = self.service.repository
        self.client = self.app.test_client()

    def tearDown(self):
        self.repository.engine.dispose()
        self.tmpdir.cleanup()
