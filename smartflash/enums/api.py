"""
API and client-infrastructure enums.
"""

from enum import Enum


class StorageBackend(str, Enum):
    """
    Credential store backends.

    - SECURE: JSON file readable only by the current user (mode 0600)
    - LOCAL: plain JSON file, the equivalent of browser local storage
    - MEMORY: process-local dict, used by tests and one-shot commands
    """

    SECURE = "secure"
    LOCAL = "local"
    MEMORY = "memory"


class ToastType(str, Enum):
    """Notification severities shown to the user."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class StorageKey(str, Enum):
    """Keys persisted in the credential store."""

    AUTH_TOKEN = "authToken"
    USER_ID = "userId"
