"""Configuration — environment settings and YAML subscription definitions."""

from recordbase.config.settings import RecordbaseSettings, get_settings
from recordbase.config.subscriptions import SubscriptionRegistry

__all__ = [
    "RecordbaseSettings",
    "SubscriptionRegistry",
    "get_settings",
]
