"""Storefront configuration.

Every setting is read from the environment once and cached. Tests call
reset_settings() after changing environment variables.
"""

import os
from dataclasses import dataclass


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class Settings:
    environment: str
    paystack_secret_key: str
    paystack_base_url: str
    site_url: str
    currency: str
    source_tag: str
    catalog_database_uri: str
    media_root: str
    media_base_url: str
    image_bucket: str
    admin_email: str
    admin_password: str
    admin_session_secret: str
    admin_session_ttl: int
    log_level: str
    log_dir: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def renders_json(self) -> bool:
        return self.environment in ("production", "staging")

    @property
    def callback_url(self) -> str | None:
        """Where the gateway sends the buyer after paying, if the site origin is known."""
        origin = self.site_url.rstrip("/")
        return f"{origin}/payment/success" if origin else None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=_env("PROTEAN_ENV", "development").lower(),
            paystack_secret_key=_env("PAYSTACK_SECRET_KEY"),
            paystack_base_url=_env("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/"),
            site_url=_env("NEXT_PUBLIC_SITE_URL") or _env("SITE_URL"),
            currency=_env("CHECKOUT_CURRENCY", "GHS").upper(),
            source_tag=_env("CHECKOUT_SOURCE_TAG", "baebe-boo-storefront"),
            catalog_database_uri=_env("CATALOG_DATABASE_URI"),
            media_root=_env("MEDIA_ROOT"),
            media_base_url=_env("MEDIA_BASE_URL", "http://localhost:8000/media").rstrip("/"),
            image_bucket=_env("IMAGE_BUCKET", "product-images"),
            admin_email=_env("ADMIN_EMAIL"),
            admin_password=_env("ADMIN_PASSWORD"),
            admin_session_secret=_env("ADMIN_SESSION_SECRET"),
            admin_session_ttl=int(_env("ADMIN_SESSION_TTL", "28800")),
            log_level=_env("LOG_LEVEL").upper(),
            log_dir=_env("LOG_DIR", "logs"),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the cached settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
