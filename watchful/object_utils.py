import math
from functools import cache

# Values of these types are compared by value, everything else by identity
SCALAR_TYPES = (bool, int, float, complex, str, bytes)


def _same_float(a, b):
    if a != a:
        return b != b
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


def same_value(a, b):
    """
    Same-value equality: NaN equals itself and 0.0 differs from -0.0.
    Scalars of the same type compare by value, other objects by identity.
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, SCALAR_TYPES):
        return False
    if isinstance(a, float):
        return _same_float(a, b)
    if isinstance(a, complex):
        return _same_float(a.real, b.real) and _same_float(a.imag, b.imag)
    return a == b


@cache
def get_class_slots(cls):
    """utility to collect all __slots__ entries for a given type and its supertypes"""
    slots = set()
    for klass in cls.__mro__:
        names = getattr(klass, "__slots__", ())
        # a single slot may be declared as a plain string
        slots.update((names,) if isinstance(names, str) else names)
    slots.difference_update(("__dict__", "__weakref__"))
    return frozenset(slots)


def has_own_attr(obj, name):
    """
    Returns whether the attribute is stored on the instance itself,
    either in its __dict__ or in an assigned slot.
    """
    try:
        if name in vars(obj):
            return True
    except TypeError:
        pass
    if name in get_class_slots(type(obj)):
        return hasattr(obj, name)
    return False
