"""
Traps wrap the methods of a builtin container type so that calling them on a
proxy operates on the proxied target and emits change events afterwards.

Methods are looked up on the type of the target at call time so that
subclasses (OrderedDict, defaultdict, ...) behave exactly as they would
without a proxy.
"""

from functools import wraps

from .events import DELETE, SET, DeleteEvent, SetEvent
from .object_utils import same_value
from .proxy import Proxy, emit_change

# Marks a key that is not present in a dict
MISSING = object()


def unwrap(value):
    return value.__target__ if isinstance(value, Proxy) else value


def getattr_trap(self, name):
    # attributes that only subclasses have, e.g. OrderedDict.move_to_end
    if name in Proxy.__slots__:
        raise AttributeError(name)
    return getattr(self.__target__, name)


def read_trap(method, obj_cls):
    @wraps(getattr(obj_cls, method))
    def trap(self, *args, **kwargs):
        target = self.__target__
        return getattr(type(target), method)(target, *args, **kwargs)

    return trap


def operator_trap(method, obj_cls):
    # binary operators need the other operand unwrapped,
    # e.g. list.__add__ refuses anything but a list
    @wraps(getattr(obj_cls, method))
    def trap(self, other):
        target = self.__target__
        return getattr(type(target), method)(target, unwrap(other))

    return trap


def diff_dict(old, new):
    events = []
    for key, value in new.items():
        if key not in old:
            events.append((SET, SetEvent(key, value, None)))
        elif not same_value(old[key], value):
            events.append((SET, SetEvent(key, value, old[key])))
    for key, value in old.items():
        if key not in new:
            events.append((DELETE, DeleteEvent(key, value)))
    return events


def diff_list(old, new):
    """
    Describes the change from old to new the way an array would: one set per
    changed or added index, one delete per index beyond the new length and
    finally a set of the length itself.
    """
    events = []
    old_length, new_length = len(old), len(new)
    for index, value in enumerate(new):
        if index >= old_length:
            events.append((SET, SetEvent(index, value, None)))
        elif not same_value(old[index], value):
            events.append((SET, SetEvent(index, value, old[index])))
    for index in range(new_length, old_length):
        events.append((DELETE, DeleteEvent(index, old[index])))
    if new_length != old_length:
        events.append((SET, SetEvent("length", new_length, old_length)))
    return events


DIFFS = {
    dict: diff_dict,
    list: diff_list,
}


def write_trap(method, obj_cls):
    diff = DIFFS[obj_cls]

    @wraps(getattr(obj_cls, method))
    def trap(self, *args, **kwargs):
        target = self.__target__
        old = obj_cls(target)
        try:
            retval = getattr(type(target), method)(target, *args, **kwargs)
        finally:
            # changes made before a failure are published as well
            for kind, event in diff(old, target):
                emit_change(self, kind, event)
        # in-place operators should keep on returning the proxy
        if retval is target:
            return self
        return retval

    return trap


def write_key_trap(method, obj_cls):
    @wraps(getattr(obj_cls, method))
    def trap(self, key, *args, **kwargs):
        target = self.__target__
        previous = target.get(key, MISSING)
        retval = getattr(type(target), method)(target, key, *args, **kwargs)
        current = target.get(key, MISSING)
        if previous is MISSING:
            if current is not MISSING:
                emit_change(self, SET, SetEvent(key, current, None))
        elif current is MISSING:
            emit_change(self, SET, SetEvent(key, None, previous))
        elif not same_value(previous, current):
            emit_change(self, SET, SetEvent(key, current, previous))
        return retval

    return trap


def delete_key_trap(method, obj_cls):
    @wraps(getattr(obj_cls, method))
    def trap(self, key, *args, **kwargs):
        target = self.__target__
        previous = target.get(key, MISSING)
        retval = getattr(type(target), method)(target, key, *args, **kwargs)
        if previous is not MISSING and key not in target:
            emit_change(self, DELETE, DeleteEvent(key, previous))
        return retval

    return trap


trap_map = {
    "READERS": read_trap,
    "OPERATORS": operator_trap,
    "WRITERS": write_trap,
    "KEYWRITERS": write_key_trap,
    "KEYDELETERS": delete_key_trap,
}


def construct_methods_traps_dict(obj_cls, traps, trap_map):
    return {
        method: trap_map[trap_type](method, obj_cls)
        for trap_type, methods in traps.items()
        for method in methods
    }
