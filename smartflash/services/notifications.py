"""
User-facing Notifications

Toast-style messages shown by screens and the study controller. A
Notifier decides how they reach the user; the controller only calls
show_toast().

Implementations:
- LoggingNotifier: writes toasts to the log (default, used in tests)
- ConsoleNotifier: prints toasts to a stream (CLI)
- RecordingNotifier: keeps toasts in memory for inspection
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional, TextIO

from smartflash.enums.api import ToastType

logger = logging.getLogger(__name__)

DEFAULT_TOAST_MS = 3000

_TOAST_PREFIX = {
    ToastType.SUCCESS: "[ok]",
    ToastType.ERROR: "[error]",
    ToastType.INFO: "[info]",
    ToastType.WARNING: "[warn]",
}


@dataclass
class Toast:
    message: str
    type: ToastType = ToastType.INFO
    duration_ms: int = DEFAULT_TOAST_MS
    title: Optional[str] = None


class Notifier:
    """Base notifier; subclasses implement _deliver()."""

    def show_toast(
        self,
        message: str,
        type: ToastType = ToastType.INFO,
        duration_ms: int = DEFAULT_TOAST_MS,
        title: Optional[str] = None,
    ) -> Toast:
        toast = Toast(message=message, type=type, duration_ms=duration_ms, title=title)
        self._deliver(toast)
        return toast

    def _deliver(self, toast: Toast) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    def _deliver(self, toast: Toast) -> None:
        level = logging.WARNING if toast.type == ToastType.ERROR else logging.INFO
        text = f"{toast.title}: {toast.message}" if toast.title else toast.message
        logger.log(level, f"toast[{toast.type.value}] {text}")


class ConsoleNotifier(Notifier):
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def _deliver(self, toast: Toast) -> None:
        prefix = _TOAST_PREFIX[toast.type]
        if toast.title:
            print(f"{prefix} {toast.title}", file=self.stream)
            print(f"    {toast.message}", file=self.stream)
        else:
            print(f"{prefix} {toast.message}", file=self.stream)


@dataclass
class RecordingNotifier(Notifier):
    toasts: list[Toast] = field(default_factory=list)

    def _deliver(self, toast: Toast) -> None:
        self.toasts.append(toast)

    @property
    def last(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None
