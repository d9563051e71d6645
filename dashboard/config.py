"""Environment-driven settings for the dashboard API.

GA4 credentials are required; the service refuses to start without them.
Multi-line private keys are usually stored with escaped newlines by hosting
providers, so ``\\n`` sequences are expanded on load.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

REQUIRED_GA4_VARIABLES = ("GOOGLE_CLIENT_EMAIL", "GOOGLE_PRIVATE_KEY", "GA4_PROPERTY_ID")

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class ConfigurationError(RuntimeError):
    """Raised when required configuration is absent."""


@dataclass(frozen=True)
class GA4Settings:
    client_email: str
    private_key: str
    property_id: str

    @property
    def property(self) -> str:
        return f"properties/{self.property_id}"

    def service_account_info(self) -> dict:
        return {
            "type": "service_account",
            "client_email": self.client_email,
            "private_key": self.private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }


@dataclass(frozen=True)
class AppSettings:
    environment: str = "production"
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _require(environ: Mapping[str, str], name: str) -> str:
    value = (environ.get(name) or "").strip()
    if not value:
        raise ConfigurationError(f"Missing environment variable: {name}")
    return value


def load_ga4_settings(environ: Mapping[str, str] | None = None) -> GA4Settings:
    """Read GA4 service-account settings.

    Raises ConfigurationError naming the first missing variable.
    """
    env = os.environ if environ is None else environ
    client_email, raw_private_key, property_id = (
        _require(env, name) for name in REQUIRED_GA4_VARIABLES
    )
    return GA4Settings(
        client_email=client_email,
        private_key=raw_private_key.replace("\\n", "\n"),
        property_id=property_id,
    )


def load_app_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    env = os.environ if environ is None else environ
    environment = (env.get("APP_ENV") or "production").strip().lower()
    raw_origins = env.get("CORS_ORIGINS") or ""
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    return AppSettings(
        environment=environment,
        cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
    )
