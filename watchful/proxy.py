from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar, cast

from .eventful import Eventful
from .events import SET, SetEvent, keyed
from .object_utils import same_value

T = TypeVar("T")

# Methods of the emission facility that are exposed on every handle
PROXY_API = frozenset(("on", "once", "off", "emit"))


class Proxy(Generic[T]):
    """
    Observable handle for an object/target.

    Please use the `observable` method to get a handle for a certain value
    instead of directly creating one yourself. The `observable` method picks
    the right kind of proxy for the value and validates the options.
    """

    __hash__ = None
    # the slots have to be very unique since we also proxy objects
    # which may define the attributes with the same names
    __slots__ = ("__eventful__", "__target__", "__weakref__")

    def __init__(self, target: T, eventful: Callable[[], Any] = Eventful):
        self.__target__ = target
        self.__eventful__ = eventful()

    def on(self, name, listener=None):
        return self.__eventful__.on(name, listener)

    def once(self, name, listener=None):
        return self.__eventful__.once(name, listener)

    def off(self, name, listener=None):
        return self.__eventful__.off(name, listener)

    def emit(self, name, payload=None):
        return self.__eventful__.emit(name, payload)


def emit_change(proxy: Proxy, kind: str, event) -> None:
    """
    Publishes the event under its kind and under its keyed name.
    """
    try:
        eventful = proxy.__eventful__
    except AttributeError:
        # the proxy is still being constructed
        return
    eventful.emit(kind, event)
    eventful.emit(keyed(kind, event.property), event)


class Ref(Proxy[T]):
    """
    Box for a value that can not be proxied, such as a number or a string.
    The value is exposed as the single `value` property and assigning to it
    emits a `set` event when the new value differs from the old one.
    """

    __slots__ = ()

    @property
    def value(self) -> T:
        return self.__target__

    @value.setter
    def value(self, value: T) -> None:
        previous = self.__target__
        if same_value(value, previous):
            return
        self.__target__ = value
        emit_change(self, SET, SetEvent("value", value, previous))

    def __repr__(self):
        return f"Ref({self.__target__!r})"


# Lookup dict for mapping a type test (list, dict, objects) to the proxy
# type that will wrap a target of that type
TYPE_LOOKUP = {}


def observable(value: T, eventful: Optional[Callable[[], Any]] = None) -> Proxy[T]:
    """
    Returns an observable handle for the given value.

    Lists, dicts and instances of user defined classes are wrapped in a
    proxy that emits events when they are mutated through the handle.
    Any other value is boxed in a Ref with a single `value` property.

    `eventful` is a factory that returns the emission facility of the
    handle, every handle gets its own instance.
    """
    if eventful is None:
        eventful = Eventful
    elif not callable(eventful):
        raise TypeError("observable: 'eventful' option must be callable if provided")

    # A new handle never wraps another handle, but its target instead
    if isinstance(value, Proxy):
        value = value.__target__

    for type_test, proxy_type in TYPE_LOOKUP.items():
        if type_test(value):
            return proxy_type(value, eventful=eventful)

    return cast(Proxy[T], Ref(value, eventful=eventful))


def to_raw(target: Proxy[T] | T) -> T:
    """
    Returns a raw object from which any trace of proxy has been replaced
    with its wrapped target value.
    """
    if isinstance(target, Proxy):
        return to_raw(target.__target__)

    if isinstance(target, list):
        return cast(T, [to_raw(t) for t in target])

    if isinstance(target, dict):
        return cast(T, {key: to_raw(value) for key, value in target.items()})

    if isinstance(target, tuple):
        return cast(T, tuple(to_raw(t) for t in target))

    if isinstance(target, set):
        return cast(T, {to_raw(t) for t in target})

    return target
