"""
Configuration settings for the Garage Booking application.

Values are resolved from the process environment first and then from a local
``.env`` file. Typed access goes through a Pydantic ``Settings`` object.
"""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"

DB_URL_KEY = "GARAGE_DB_URL"
DB_USER_KEY = "GARAGE_DB_USER"
DB_PASSWORD_KEY = "GARAGE_DB_PASSWORD"
EMAIL_ENABLED_KEY = "GARAGE_EMAIL_ENABLED"

# Each setting maps to the keys that may carry it; the first non-blank wins.
SETTING_KEYS = {
    "database_url": (DB_URL_KEY,),
    "database_user": (DB_USER_KEY,),
    "database_password": (DB_PASSWORD_KEY,),
    "email_enabled": (EMAIL_ENABLED_KEY,),
    "smtp_host": ("GARAGE_SMTP_HOST", "SMTP_HOST"),
    "smtp_port": ("GARAGE_SMTP_PORT", "SMTP_PORT"),
    "smtp_user": ("GARAGE_SMTP_USER", "SMTP_USER"),
    "smtp_pass": ("GARAGE_SMTP_PASS", "SMTP_PASS"),
    "smtp_from": ("GARAGE_SMTP_FROM", "SMTP_FROM"),
    "smtp_secure": ("GARAGE_SMTP_SECURE", "SMTP_SECURE"),
    "smtp_timeout": ("GARAGE_SMTP_TIMEOUT", "SMTP_TIMEOUT"),
    "secret_key": ("SECRET_KEY",),
    "jwt_secret_key": ("JWT_SECRET_KEY",),
    "cors_origins": ("CORS_ORIGIN",),
    "debug": ("DEBUG",),
}


def parse_dotenv(path) -> Dict[str, str]:
    """
    Read ``KEY=VALUE`` lines from ``path``.

    Blank lines and ``#`` comments are skipped, one pair of matching quotes is
    stripped from the value, and the first occurrence of a key wins. A missing
    or unreadable file yields no entries.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    values: Dict[str, str] = {}
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Unable to read %s file: %s", env_path, exc)
        return {}

    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, separator, value = line.partition("=")
        key = key.strip()
        if not separator or not key:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]

        if key not in values:
            values[key] = value

    return values


class ConfigLoader:
    """Resolves named settings from the environment, then the dotfile."""

    def __init__(self, env_file=DEFAULT_ENV_FILE, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.dotenv = parse_dotenv(env_file)

    def get(self, key: str) -> str:
        value = self.environ.get(key)
        if value is None or not value.strip():
            value = self.dotenv.get(key)
        return "" if value is None else value.strip()

    def get_or_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return value if value else default

    def missing(self, *keys: str) -> List[str]:
        return [key for key in keys if not self.get(key)]

    def first(self, *keys: str, default: str = "") -> str:
        """Return the first non-blank value among ``keys``."""
        for key in keys:
            value = self.get(key)
            if value:
                return value
        return default


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class Settings(BaseSettings):
    """
    Application settings resolved through :class:`ConfigLoader`.

    Only init values are read: the loader already merges the environment and
    the dotfile, keeping the first occurrence of a duplicated dotfile key,
    which python-dotenv would not.
    """

    # Application
    app_name: str = "Garage Booking"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = ""
    database_user: str = ""
    database_password: str = ""

    # Email
    email_enabled: bool = False
    smtp_host: str = "smtp-relay.brevo.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    smtp_secure: Optional[bool] = None
    smtp_timeout: float = 15.0

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    jwt_secret_key: str = "jwt-dev-secret-key"

    # CORS
    cors_origins: str = "*"

    @field_validator("email_enabled", "debug", mode="before")
    @classmethod
    def _parse_flag(cls, value):
        return _truthy(value)

    @field_validator("smtp_secure", mode="before")
    @classmethod
    def _parse_secure(cls, value):
        if value is None or str(value).strip() == "":
            return None
        return _truthy(value)

    @model_validator(mode="after")
    def _apply_smtp_defaults(self):
        if not self.smtp_from:
            self.smtp_from = self.smtp_user
        if self.smtp_secure is None:
            self.smtp_secure = self.smtp_port == 465
        return self

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings,
                                   dotenv_settings, file_secret_settings):
        # The loader already covers the environment and the dotfile.
        return (init_settings,)


def load_settings(loader: Optional[ConfigLoader] = None) -> Settings:
    """Build :class:`Settings` from the loader; blank keys keep their defaults."""
    loader = loader or ConfigLoader()
    values = {}
    for field, keys in SETTING_KEYS.items():
        value = loader.first(*keys)
        if value:
            values[field] = value
    return Settings(**values)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
