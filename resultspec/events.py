"""Lifecycle events delivered to materialized objects.

Objects opt in by inheriting :class:`EventMixin`, which satisfies
:class:`~resultspec.protocols.EventTargetProtocol`. Listeners can be attached
to a single instance with :meth:`EventMixin.on` or to every instance of a
class with :func:`listen`.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from typing import Any, ClassVar, Optional

from resultspec.utils.logging import get_logger

__all__ = (
    "AfterQueryEventParam",
    "EventListener",
    "EventMixin",
    "EventParam",
    "ModelEvents",
    "class_listeners",
    "listen",
    "register_class_listener",
    "unregister_class_listener",
)

logger = get_logger("events")

EventListener = Callable[["EventParam"], Any]

_sequence = count()
_LISTENERS_KEY = "__event_listeners__"


class ModelEvents:
    """Names of the events fired on model instances."""

    AFTER_QUERY: ClassVar[str] = "AfterQuery"


@dataclass(slots=True)
class EventParam:
    """Payload handed to every listener of an event."""

    name: str
    data: "dict[str, Any]" = field(default_factory=dict)
    target: Any = None
    _propagation_stopped: bool = field(default=False, repr=False)

    def stop_propagation(self) -> None:
        """Prevent listeners with a lower priority from receiving this event."""
        self._propagation_stopped = True

    @property
    def is_propagation_stopped(self) -> bool:
        return self._propagation_stopped


@dataclass(slots=True)
class AfterQueryEventParam(EventParam):
    """Payload of :attr:`ModelEvents.AFTER_QUERY`."""

    @property
    def model(self) -> Any:
        """The instance that was just materialized from a row."""
        return self.data.get("model", self.target)


@dataclass(slots=True, frozen=True)
class _Registration:
    listener: EventListener
    priority: int
    once: bool
    sequence: int


class _ClassListenerRegistry:
    """Class-level listeners resolved along the MRO, with a per-class cache."""

    __slots__ = ("_cache", "_registry")

    def __init__(self) -> None:
        self._registry: dict[tuple[type, str], list[_Registration]] = {}
        self._cache: dict[tuple[type, str], tuple[_Registration, ...]] = {}

    def register(self, cls: type, name: str, listener: EventListener, priority: int = 0) -> None:
        self._registry.setdefault((cls, name), []).append(
            _Registration(listener=listener, priority=priority, once=False, sequence=next(_sequence))
        )
        self._cache.clear()

    def unregister(self, cls: type, name: str, listener: "Optional[EventListener]" = None) -> None:
        key = (cls, name)
        if listener is None:
            self._registry.pop(key, None)
        elif key in self._registry:
            self._registry[key] = [r for r in self._registry[key] if r.listener != listener]
        self._cache.clear()

    def get(self, cls: type, name: str) -> "tuple[_Registration, ...]":
        key = (cls, name)
        if key in self._cache:
            return self._cache[key]
        resolved = tuple(
            registration for base in cls.__mro__ for registration in self._registry.get((base, name), ())
        )
        self._cache[key] = resolved
        return resolved

    def clear(self) -> None:
        self._registry.clear()
        self._cache.clear()


class_listeners = _ClassListenerRegistry()


def _instance_listeners(target: Any) -> "dict[str, list[_Registration]]":
    return vars(target).setdefault(_LISTENERS_KEY, {})


def register_class_listener(cls: type, name: str, listener: EventListener, priority: int = 0) -> None:
    """Attach ``listener`` to event ``name`` for every instance of ``cls`` and its subclasses."""
    class_listeners.register(cls, name, listener, priority)


def unregister_class_listener(cls: type, name: str, listener: "Optional[EventListener]" = None) -> None:
    """Detach one listener, or all listeners when ``listener`` is None."""
    class_listeners.unregister(cls, name, listener)


def listen(name: str, cls: type, priority: int = 0) -> "Callable[[EventListener], EventListener]":
    """Decorator form of :func:`register_class_listener`.

    Example::

        @listen(ModelEvents.AFTER_QUERY, User)
        def mask_email(event: AfterQueryEventParam) -> None:
            event.model.email = "***"
    """

    def decorator(listener: EventListener) -> EventListener:
        register_class_listener(cls, name, listener, priority)
        return listener

    return decorator


class EventMixin:
    """Gives instances ``on``/``one``/``off``/``trigger``.

    Instance listeners live in the instance ``__dict__``, so subclasses must
    not be slotted. Instance attributes may shadow these methods; call them
    through the class in that case, e.g. ``type(obj).trigger(obj, name)``.
    """

    def on(self, name: str, listener: EventListener, priority: int = 0) -> None:
        """Attach ``listener`` to event ``name`` on this instance only."""
        _instance_listeners(self).setdefault(name, []).append(
            _Registration(listener=listener, priority=priority, once=False, sequence=next(_sequence))
        )

    def one(self, name: str, listener: EventListener, priority: int = 0) -> None:
        """Attach ``listener`` for a single delivery."""
        _instance_listeners(self).setdefault(name, []).append(
            _Registration(listener=listener, priority=priority, once=True, sequence=next(_sequence))
        )

    def off(self, name: str, listener: "Optional[EventListener]" = None) -> None:
        """Detach one instance listener, or all of them when ``listener`` is None."""
        listeners = _instance_listeners(self)
        if listener is None:
            listeners.pop(name, None)
        elif name in listeners:
            listeners[name] = [r for r in listeners[name] if r.listener != listener]

    def trigger(
        self,
        name: str,
        data: "Optional[dict[str, Any]]" = None,
        target: Any = None,
        param_class: "type[EventParam]" = EventParam,
    ) -> EventParam:
        """Deliver event ``name`` synchronously.

        Listeners run by descending priority, then registration order.
        Exceptions raised by listeners propagate to the caller.

        Returns:
            The event param after every listener ran.
        """
        param = param_class(name=name, data=dict(data or {}), target=self if target is None else target)
        instance_registrations = vars(self).get(_LISTENERS_KEY, {}).get(name, [])
        registrations = sorted(
            (*class_listeners.get(type(self), name), *instance_registrations),
            key=lambda r: (-r.priority, r.sequence),
        )
        if not registrations:
            return param

        logger.debug("Triggering %s on %s for %d listener(s)", name, type(self).__name__, len(registrations))
        for registration in registrations:
            if registration.once:
                instance_registrations.remove(registration)
            registration.listener(param)
            if param.is_propagation_stopped:
                break
        return param
