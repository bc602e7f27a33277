"""
Payloads that are published for every observed change.

Each payload is emitted twice: once under its kind (``set``, ``delete``,
``define``) and once under the keyed name ``<kind>:<property>``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable, NamedTuple, Optional

if TYPE_CHECKING:
    from .descriptors import Descriptor

SET = "set"
DELETE = "delete"
DEFINE = "define"


class SetEvent(NamedTuple):
    property: Hashable
    value: Any
    # None when the property did not exist before the write
    previous: Any


class DeleteEvent(NamedTuple):
    property: Hashable
    previous: Any


class DefineEvent(NamedTuple):
    property: Hashable
    descriptor: Descriptor
    previous: Optional[Descriptor]


def keyed(kind: str, property: Hashable) -> str:
    return f"{kind}:{property}"
