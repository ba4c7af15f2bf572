"""Application settings.

Values come from the ``[custom]`` table of ``domain.toml`` (with the active
``PROTEAN_ENV`` overlay applied by Protean) and can be overridden per process
with ``STOREFRONT_<NAME>`` environment variables.
"""

import os
from dataclasses import dataclass, fields

from storefront.domain import storefront

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    session_secret: str = "storefront-development-secret"
    session_cookie: str = "storefront_session"
    session_max_age: int = 14 * 24 * 60 * 60
    trust_client_prices: bool = True
    enforce_status_transitions: bool = False
    tax_rate: float = 0.08
    free_shipping_threshold: float = 50.0
    flat_shipping_rate: float = 9.99
    dev_login_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return os.environ.get("PROTEAN_ENV") == "production"


def _coerce(value, target_type):
    if target_type is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_VALUES
    return target_type(value)


def get_settings() -> Settings:
    """Resolve settings from domain configuration and the environment."""
    custom = storefront.config.get("custom") or {}

    values = {}
    for field in fields(Settings):
        target_type = type(field.default)
        env_value = os.environ.get(f"STOREFRONT_{field.name.upper()}")
        if env_value is not None:
            values[field.name] = _coerce(env_value, target_type)
        elif field.name in custom:
            values[field.name] = _coerce(custom[field.name], target_type)

    settings = Settings(**values)
    if settings.is_production and settings.dev_login_enabled:
        settings = Settings(**{**values, "dev_login_enabled": False})
    return settings
