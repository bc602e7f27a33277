"""
Default emission facility for observable handles.

Listeners for an event are called in subscription order with the payload
as their only argument. A listener that raises does not prevent delivery
to the listeners after it, and its error never reaches the code that
triggered the emission: it is reported as a ListenerWarning instead.
"""

from __future__ import annotations

import asyncio
import inspect
import warnings
from collections import defaultdict
from functools import partial
from typing import Any, Awaitable, Callable, Optional
from weakref import WeakMethod

Listener = Callable[[Any], Any]


class ListenerWarning(RuntimeWarning):
    """
    Issued when a listener raised an exception during emission.
    """

    pass


def is_bound_method(fn: Callable) -> bool:
    """
    Returns whether the given function is a bound method.
    """
    return hasattr(fn, "__self__") and hasattr(fn, "__func__")


def describe(listener: Callable) -> str:
    qualname = getattr(listener, "__qualname__", None)
    if qualname is None:
        return repr(listener)
    return f"{getattr(listener, '__module__', '?')}.{qualname}"


async def _resolve(awaitable: Awaitable) -> Any:
    return await awaitable


class Subscription:
    # bound methods are referenced weakly so that subscribing
    # doesn't keep their instance alive
    __slots__ = ("_ref", "once")

    def __init__(self, listener: Listener, once: bool = False) -> None:
        self._ref = WeakMethod(listener) if is_bound_method(listener) else listener
        self.once = once

    def resolve(self) -> Optional[Listener]:
        if isinstance(self._ref, WeakMethod):
            return self._ref()
        return self._ref


class Eventful:
    __slots__ = ("__weakref__", "_listeners", "_tasks")

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Subscription]] = defaultdict(list)
        # keep strong references to running listener tasks
        self._tasks: set[asyncio.Task] = set()

    def on(self, name: str, listener: Optional[Listener] = None):
        """
        Subscribe the listener to the named event. Can be used as a
        decorator when no listener is given.
        """
        if listener is None:
            return partial(self.on, name)
        return self._subscribe(name, listener, once=False)

    def once(self, name: str, listener: Optional[Listener] = None):
        """
        Subscribe the listener for the next emission of the named event only.
        """
        if listener is None:
            return partial(self.once, name)
        return self._subscribe(name, listener, once=True)

    def off(self, name: str, listener: Optional[Listener] = None) -> None:
        """
        Unsubscribe the listener from the named event, or all
        listeners of that event when no listener is given.
        """
        if listener is None:
            self._listeners.pop(name, None)
            return
        subs = self._listeners.get(name)
        if not subs:
            return
        subs[:] = [sub for sub in subs if sub.resolve() != listener]

    def listeners(self, name: str) -> tuple[Listener, ...]:
        subs = self._listeners.get(name, ())
        listeners = (sub.resolve() for sub in subs)
        return tuple(listener for listener in listeners if listener is not None)

    def emit(self, name: str, payload: Any = None) -> None:
        subs = self._listeners.get(name)
        if not subs:
            return

        # iterate over a copy: listeners may (un)subscribe while being called
        for sub in tuple(subs):
            listener = sub.resolve()
            if (listener is None or sub.once) and sub in subs:
                subs.remove(sub)
            if listener is None:
                continue

            try:
                result = listener(payload)
            except Exception as e:
                self._report(name, listener, e)
                continue

            if inspect.isawaitable(result):
                self._schedule(name, listener, result)

    def _subscribe(self, name: str, listener: Listener, once: bool) -> Listener:
        if not callable(listener):
            raise TypeError(f"listener for '{name}' must be callable")
        self._listeners[name].append(Subscription(listener, once=once))
        return listener

    def _schedule(self, name: str, listener: Listener, awaitable: Awaitable) -> None:
        """
        Runs the awaitable returned by a listener. Inside a running event loop
        it becomes a task that is not waited for, otherwise it is run to
        completion right away.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            try:
                asyncio.run(_resolve(awaitable))
            except Exception as e:
                self._report(name, listener, e)
            return

        task = loop.create_task(_resolve(awaitable))
        self._tasks.add(task)
        task.add_done_callback(partial(self._task_done, name, listener))

    def _task_done(self, name: str, listener: Listener, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._report(name, listener, exc)

    def _report(self, name: str, listener: Listener, exc: BaseException) -> None:
        warnings.warn(
            f"Listener {describe(listener)} for event '{name}' raised {exc!r}",
            ListenerWarning,
            stacklevel=3,
        )
