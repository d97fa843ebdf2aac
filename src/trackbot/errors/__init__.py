# 🚨 trackbot/errors/__init__.py
"""🚨 Доменні винятки та централізована обробка помилок."""

from .custom_errors import (
    AcquisitionFailed,
    AppError,
    DeliveryRejected,
    InvalidInlineQuery,
    ProcessingFailure,
    ProviderUnauthenticated,
    ProviderUnavailable,
    StaleReference,
    TrackNotFound,
    UserVisibleError,
)

__all__ = [
    "AcquisitionFailed",
    "AppError",
    "DeliveryRejected",
    "InvalidInlineQuery",
    "ProcessingFailure",
    "ProviderUnauthenticated",
    "ProviderUnavailable",
    "StaleReference",
    "TrackNotFound",
    "UserVisibleError",
]
