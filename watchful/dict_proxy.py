from .proxy import TYPE_LOOKUP, Proxy
from .traps import construct_methods_traps_dict, getattr_trap, trap_map

dict_traps = {
    "READERS": {
        "copy",
        "get",
        "items",
        "keys",
        "values",
        "__contains__",
        "__format__",
        "__iter__",
        "__len__",
        "__repr__",
        "__reversed__",
        "__sizeof__",
        "__str__",
    },
    "OPERATORS": {
        "__eq__",
        "__ge__",
        "__gt__",
        "__le__",
        "__lt__",
        "__ne__",
        "__or__",
        "__ror__",
    },
    "WRITERS": {
        "clear",
        "popitem",
        "update",
        "__ior__",
    },
    "KEYWRITERS": {
        "setdefault",
        # defaultdict inserts missing keys on read
        "__getitem__",
        "__setitem__",
    },
    "KEYDELETERS": {
        "pop",
        "__delitem__",
    },
}


class DictProxyBase(Proxy[dict]):
    __slots__ = ()
    __getattr__ = getattr_trap


DictProxy = type(
    "DictProxy",
    (DictProxyBase,),
    {"__slots__": (), **construct_methods_traps_dict(dict, dict_traps, trap_map)},
)


def type_test(target):
    return isinstance(target, dict)


TYPE_LOOKUP[type_test] = DictProxy
