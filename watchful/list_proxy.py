from .proxy import TYPE_LOOKUP, Proxy
from .traps import construct_methods_traps_dict, getattr_trap, trap_map

list_traps = {
    "READERS": {
        "count",
        "index",
        "copy",
        "__contains__",
        "__format__",
        "__getitem__",
        "__iter__",
        "__len__",
        "__mul__",
        "__repr__",
        "__reversed__",
        "__rmul__",
        "__sizeof__",
        "__str__",
    },
    "OPERATORS": {
        "__add__",
        "__eq__",
        "__ge__",
        "__gt__",
        "__le__",
        "__lt__",
        "__ne__",
    },
    # every list mutation may shift indices, so they are all diffed
    "WRITERS": {
        "append",
        "clear",
        "extend",
        "insert",
        "pop",
        "remove",
        "reverse",
        "sort",
        "__delitem__",
        "__iadd__",
        "__imul__",
        "__setitem__",
    },
}


class ListProxyBase(Proxy[list]):
    __slots__ = ()
    __getattr__ = getattr_trap


ListProxy = type(
    "ListProxy",
    (ListProxyBase,),
    {"__slots__": (), **construct_methods_traps_dict(list, list_traps, trap_map)},
)


def type_test(target):
    return isinstance(target, list)


TYPE_LOOKUP[type_test] = ListProxy
