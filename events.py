"""Event kinds and the subscriber registry for the idle monitor."""

import inspect
import logging
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class IdleEvent(Enum):
    """Transitions published by the idle monitor."""
    IDLE = "idle"
    ACTIVE = "active"


class ActivitySignal(Enum):
    """Input signals an activity source can report."""
    POINTER_MOVE = "pointer_move"
    KEY_DOWN = "key_down"


@dataclass
class Subscriber:
    """A registered callback and the object it runs against."""
    callback: Callable[..., Any]
    context: Any = None

    def invoke(self) -> None:
        if self.context is None:
            self.callback()
        else:
            types.MethodType(self.callback, self.context)()


def _check_bindable(callback: Callable[..., Any], context: Any) -> None:
    """Raise TypeError unless ``callback`` can take ``context`` as its only argument."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return  # builtins without introspectable signatures
    try:
        signature.bind(context)
    except TypeError:
        raise TypeError(
            f"{callback!r} was subscribed with a context but does not accept one argument"
        ) from None


def _coerce_kind(kind: IdleEvent | str) -> IdleEvent:
    if isinstance(kind, IdleEvent):
        return kind
    try:
        return IdleEvent(kind)
    except ValueError:
        raise ValueError(f"Unknown event kind: {kind!r}") from None


class EventEmitter:
    """Synchronous publish/subscribe over IdleEvent kinds.

    Subscribers for a kind are called in registration order. The same
    callback may be registered more than once and is then called once per
    registration. publish() iterates a snapshot taken when it starts, so
    subscribing or unsubscribing from inside a callback only affects later
    publishes.
    """

    def __init__(self) -> None:
        self._subscribers: dict[IdleEvent, list[Subscriber]] = {}

    def subscribe(self, kind: IdleEvent | str, callback: Callable[..., Any], context: Any = None) -> None:
        """Subscribe a callback to an event kind.

        Args:
            kind: Event kind to listen for
            callback: Called with no arguments, or bound to ``context``
                (receiving it as its first argument) when one is given
            context: Optional object the callback runs against

        Raises:
            TypeError: If a context is given and the callback cannot be bound to it
        """
        kind = _coerce_kind(kind)
        if context is not None:
            _check_bindable(callback, context)
        if kind not in self._subscribers:
            self._subscribers[kind] = []
        self._subscribers[kind].append(Subscriber(callback, context))

    def unsubscribe(self, kind: IdleEvent | str, callback: Callable[..., Any] | None = None) -> None:
        """Unsubscribe from an event kind.

        Without a callback every subscriber of the kind is dropped. With one,
        only the first registration of an equal callback is removed
        (bound methods compare equal when they wrap the same function and object).
        Unknown kinds and callbacks are ignored.
        """
        kind = _coerce_kind(kind)
        subscribers = self._subscribers.get(kind)
        if not subscribers:
            return

        if callback is None:
            del self._subscribers[kind]
            return

        for i, subscriber in enumerate(subscribers):
            if subscriber.callback == callback:
                del subscribers[i]
                break

    def publish(self, kind: IdleEvent | str) -> None:
        """Call every subscriber of ``kind``; a failing one does not stop the rest."""
        kind = _coerce_kind(kind)
        for subscriber in list(self._subscribers.get(kind, [])):
            try:
                subscriber.invoke()
            except Exception:
                logger.exception("Error in %s subscriber %r", kind.value, subscriber.callback)

    def count(self, kind: IdleEvent | str) -> int:
        """Number of subscriptions for ``kind``."""
        return len(self._subscribers.get(_coerce_kind(kind), []))
