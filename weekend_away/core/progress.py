"""Progress notifications for agent runs."""

import logging
from typing import Callable, Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressObserver(Protocol):
    def notify(self, text: str) -> None:
        ...


class NullObserver:
    """Discards every notification."""

    def notify(self, text: str) -> None:
        pass


class CallbackObserver:
    """Adapts a plain ``callback(text)`` function."""

    def __init__(self, callback: Callable[[str], None]):
        self.callback = callback

    def notify(self, text: str) -> None:
        self.callback(text)


class RecordingObserver:
    """Keeps every notification, in order."""

    def __init__(self):
        self.messages = []

    def notify(self, text: str) -> None:
        self.messages.append(text)


ProgressTarget = Union[ProgressObserver, Callable[[str], None], None]


def as_observer(target: ProgressTarget) -> ProgressObserver:
    """Accept an observer, a callable or None."""
    if target is None:
        return NullObserver()
    if isinstance(target, ProgressObserver):
        return target
    if callable(target):
        return CallbackObserver(target)
    raise TypeError(f"Expected a progress observer or callable, got {type(target).__name__}")


def safe_notify(observer: Optional[ProgressObserver], text: str):
    """Deliver a notification; observer failures are logged, never raised."""
    logger.debug("progress: %s", text)
    if observer is None:
        return
    try:
        observer.notify(text)
    except Exception:
        logger.warning("Progress observer failed on %r", text, exc_info=True)
