from __future__ import annotations
import logging
import random
import string
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

TOAST_TYPES = ("success", "error", "info")
DEFAULT_DURATION_MS = 5000
ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 7

# scheduler(delay_seconds, callback) -> handle with .cancel()
Scheduler = Callable[[float, Callable[[], None]], Any]


def threading_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


@dataclass(frozen=True)
class Toast:
    id: str
    type: str
    message: str
    duration: int = DEFAULT_DURATION_MS


class ToastManager:
    """Active notifications; each one removes itself after its duration."""

    def __init__(self, scheduler: Scheduler = threading_scheduler):
        self._scheduler = scheduler
        self._toasts: List[Toast] = []
        self._timers: Dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def toasts(self) -> List[Toast]:
        with self._lock:
            return list(self._toasts)

    def _new_id(self) -> str:
        while True:
            toast_id = "".join(random.choices(ID_ALPHABET, k=ID_LENGTH))
            if toast_id not in self._timers:
                return toast_id

    def show(self, type: str, message: str, duration: Optional[int] = None) -> Toast:
        if type not in TOAST_TYPES:
            raise ValueError(f"unknown toast type: {type!r}")
        duration = DEFAULT_DURATION_MS if duration is None else duration

        with self._lock:
            toast = Toast(id=self._new_id(), type=type, message=message, duration=duration)
            self._toasts.append(toast)
            self._timers[toast.id] = None

        handle = self._scheduler(duration / 1000.0, lambda: self.remove(toast.id))
        with self._lock:
            if toast.id in self._timers:
                self._timers[toast.id] = handle
        return toast

    def success(self, message: str, duration: Optional[int] = None) -> Toast:
        return self.show("success", message, duration)

    def error(self, message: str, duration: Optional[int] = None) -> Toast:
        return self.show("error", message, duration)

    def info(self, message: str, duration: Optional[int] = None) -> Toast:
        return self.show("info", message, duration)

    def remove(self, toast_id: str) -> None:
        with self._lock:
            self._toasts = [t for t in self._toasts if t.id != toast_id]
            handle = self._timers.pop(toast_id, None)
        if handle is not None:
            handle.cancel()

    def close(self) -> None:
        with self._lock:
            handles = [h for h in self._timers.values() if h is not None]
            self._timers.clear()
            self._toasts = []
        for handle in handles:
            handle.cancel()
