import operator

from .events import DELETE, SET, DeleteEvent, SetEvent
from .object_utils import has_own_attr, same_value
from .proxy import PROXY_API, TYPE_LOOKUP, Proxy, emit_change
from .traps import MISSING, unwrap


class ObjectProxyBase(Proxy):
    __slots__ = ()

    def __getattribute__(self, name):
        if name in Proxy.__slots__ or name in PROXY_API:
            return super().__getattribute__(name)

        # methods are bound to the target, so mutations made
        # from within a method are not observed
        return getattr(self.__target__, name)

    def __setattr__(self, name, value):
        if name in Proxy.__slots__:
            return super().__setattr__(name, value)

        target = self.__target__
        # read through properties and class attributes just like
        # a plain attribute lookup on the target would
        previous = getattr(target, name, MISSING)
        setattr(target, name, value)
        current = getattr(target, name, MISSING)

        if previous is MISSING:
            if current is not MISSING:
                emit_change(self, SET, SetEvent(name, current, None))
        elif current is MISSING:
            # the write went through but left nothing readable behind
            emit_change(self, SET, SetEvent(name, None, previous))
        elif not same_value(previous, current):
            emit_change(self, SET, SetEvent(name, current, previous))

    def __delattr__(self, name):
        if name in Proxy.__slots__:
            return super().__delattr__(name)

        target = self.__target__
        had = has_own_attr(target, name)
        previous = getattr(target, name) if had else None

        delattr(target, name)

        if had and not has_own_attr(target, name):
            emit_change(self, DELETE, DeleteEvent(name, previous))


def passthrough(method):
    def trap(self, *args, **kwargs):
        fn = getattr(self.__target__, method, None)
        if fn is None:
            # we don't cache this
            # since it is possible a class is dynamically modified later
            # invalidating the cached result...
            raise TypeError(f"object of type '{type(self)}' has no {method}")
        return fn(*args, **kwargs)

    return trap


def unary(fn):
    def trap(self, *args):
        return fn(self.__target__, *args)

    return trap


def binary(fn):
    def trap(self, other):
        return fn(self.__target__, unwrap(other))

    return trap


def reflected(fn):
    def trap(self, other):
        return fn(unwrap(other), self.__target__)

    return trap


def inplace(fn):
    def trap(self, other):
        target = self.__target__
        result = fn(target, unwrap(other))
        # a target that mutated itself keeps on being observed through the proxy
        if result is target:
            return self
        return result

    return trap


# Dunder methods are looked up on the type, so the proxy has to define
# them explicitly. Going through the builtins and the operator module
# keeps the fallback behaviour (reflected operands, bool without __bool__)
# of the target intact.
unary_methods = {
    "__abs__": abs,
    "__bool__": bool,
    "__bytes__": bytes,
    "__complex__": complex,
    "__contains__": operator.contains,
    "__delitem__": operator.delitem,
    "__dir__": dir,
    "__float__": float,
    "__format__": format,
    "__getitem__": operator.getitem,
    "__hash__": hash,
    "__index__": operator.index,
    "__int__": int,
    "__invert__": operator.invert,
    "__iter__": iter,
    "__len__": len,
    "__neg__": operator.neg,
    "__pos__": operator.pos,
    "__repr__": repr,
    "__reversed__": reversed,
    "__round__": round,
    "__setitem__": operator.setitem,
    "__str__": str,
}

binary_operators = {
    "add": operator.add,
    "and": operator.and_,
    "divmod": divmod,
    "floordiv": operator.floordiv,
    "lshift": operator.lshift,
    "matmul": operator.matmul,
    "mod": operator.mod,
    "mul": operator.mul,
    "or": operator.or_,
    "pow": operator.pow,
    "rshift": operator.rshift,
    "sub": operator.sub,
    "truediv": operator.truediv,
    "xor": operator.xor,
}

comparisons = {
    "__eq__": operator.eq,
    "__ge__": operator.ge,
    "__gt__": operator.gt,
    "__le__": operator.le,
    "__lt__": operator.lt,
    "__ne__": operator.ne,
}

passthrough_methods = [
    "__aenter__",
    "__aexit__",
    "__aiter__",
    "__anext__",
    "__await__",
    "__call__",
    "__ceil__",
    "__enter__",
    "__exit__",
    "__floor__",
    "__length_hint__",
    "__next__",
    "__trunc__",
]


def construct_object_methods():
    methods = {method: passthrough(method) for method in passthrough_methods}
    methods.update({method: unary(fn) for method, fn in unary_methods.items()})
    methods.update({method: binary(fn) for method, fn in comparisons.items()})
    for name, fn in binary_operators.items():
        methods[f"__{name}__"] = binary(fn)
        methods[f"__r{name}__"] = reflected(fn)
        if name != "divmod":
            methods[f"__i{name}__"] = inplace(getattr(operator, f"i{name}"))
    return methods


ObjectProxy = type(
    "ObjectProxy",
    (ObjectProxyBase,),
    {"__slots__": (), **construct_object_methods()},
)


def type_test(target):
    # exclude builtin objects and classes
    # exclude objects for which we have better proxies available
    # exclude ndarrays
    return not isinstance(target, (list, dict, type)) and type(
        target
    ).__module__ not in (object.__module__, "numpy")


TYPE_LOOKUP[type_test] = ObjectProxy
