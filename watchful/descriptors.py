"""
Property definition, the counterpart of assignment that bypasses setters.

Defining a property on a dict or list stores the value under the key or
index. On an object it stores the value on the instance itself, without
going through a class level setter. Defining a property through a dict or
object handle emits a `define` event, defining it through a list handle is
not observed at all.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import singledispatch
from types import MemberDescriptorType
from typing import Any, Hashable, Optional, TypeVar

from .dict_proxy import DictProxyBase
from .events import DEFINE, DefineEvent
from .object_proxy import ObjectProxyBase
from .object_utils import has_own_attr
from .proxy import Proxy, Ref, emit_change

T = TypeVar("T")


@dataclass(frozen=True)
class Descriptor:
    value: Any = None


@singledispatch
def get_own_descriptor(target, key: Hashable) -> Optional[Descriptor]:
    if has_own_attr(target, key):
        return Descriptor(getattr(target, key))
    return None


@get_own_descriptor.register(dict)
def _dict_descriptor(target: dict, key: Hashable) -> Optional[Descriptor]:
    if key in target:
        return Descriptor(target[key])
    return None


@get_own_descriptor.register(list)
def _list_descriptor(target: list, key: Hashable) -> Optional[Descriptor]:
    if isinstance(key, int) and -len(target) <= key < len(target):
        return Descriptor(target[key])
    return None


@singledispatch
def define_own(target, key: Hashable, descriptor: Descriptor) -> None:
    if not isinstance(key, str):
        raise TypeError(f"attribute name must be string, not '{type(key).__name__}'")

    attr = inspect.getattr_static(type(target), key, None)
    if isinstance(attr, MemberDescriptorType):
        # a slot stores the value on the instance
        attr.__set__(target, descriptor.value)
        return
    if hasattr(type(attr), "__set__") or hasattr(type(attr), "__delete__"):
        raise TypeError(
            f"cannot define property '{key}' of '{type(target).__name__}' object: "
            "it is managed by a data descriptor of the class"
        )
    vars(target)[key] = descriptor.value


@define_own.register(dict)
def _define_key(target: dict, key: Hashable, descriptor: Descriptor) -> None:
    dict.__setitem__(target, key, descriptor.value)


@define_own.register(list)
def _define_index(target: list, key: Hashable, descriptor: Descriptor) -> None:
    if key == len(target):
        list.append(target, descriptor.value)
    else:
        list.__setitem__(target, key, descriptor.value)


def get_own_property_descriptor(obj, key: Hashable) -> Optional[Descriptor]:
    """
    Returns the descriptor of the property that is stored on the value
    itself, or None when there is no such property.
    """
    if isinstance(obj, Ref):
        return Descriptor(obj.value) if key == "value" else None
    if isinstance(obj, Proxy):
        obj = obj.__target__
    return get_own_descriptor(obj, key)


def define_property(obj: T, key: Hashable, descriptor: Descriptor) -> T:
    """
    Defines the property on the given value and returns the value.

    When the value is a handle for a dict or object, a `define` event with
    the previous descriptor (None if there was none) is emitted after the
    property has been defined.
    """
    if not isinstance(descriptor, Descriptor):
        raise TypeError(
            "property descriptor must be a Descriptor, "
            f"not '{type(descriptor).__name__}'"
        )

    if not isinstance(obj, Proxy):
        define_own(obj, key, descriptor)
        return obj

    if isinstance(obj, Ref):
        raise TypeError("cannot define properties on a Ref")

    target = obj.__target__
    # only plain object handles observe definitions
    if not isinstance(obj, (DictProxyBase, ObjectProxyBase)):
        define_own(target, key, descriptor)
        return obj

    previous = get_own_descriptor(target, key)
    define_own(target, key, descriptor)
    emit_change(obj, DEFINE, DefineEvent(key, descriptor, previous))
    return obj
