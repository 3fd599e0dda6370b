"""
Shape helpers shared by the comparator and the option constructors.

A "record" is an instance of a user-level class that stores attributes. A
record's "private fields" are its attributes named with a single leading
underscore.
"""

import types
from collections.abc import Mapping, Set
from enum import Enum
from typing import Any


_NON_RECORD_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    list,
    tuple,
    Mapping,
    Set,
    Enum,
)


def is_record(value: Any) -> bool:  # noqa: ANN401
    """Return True if ``value`` is an instance of a class with attribute storage."""
    if value is None or isinstance(value, _NON_RECORD_TYPES):
        return False
    if type(value).__module__ == 'builtins':
        return False
    return hasattr(value, '__dict__') or bool(_slot_names(type(value)))


def is_private_name(name: str) -> bool:
    """Return True for ``_x`` style names; dunder names are not private fields."""
    if not name.startswith('_'):
        return False
    return not (name.startswith('__') and name.endswith('__'))


def private_fields(value: Any) -> list[str]:  # noqa: ANN401
    """
    List the private field names of a record, in declaration order.

    Looks at the instance ``__dict__``, every ``__slots__`` in the MRO, and
    pydantic private attributes.
    """
    names: list[str] = []
    names.extend(getattr(value, '__dict__', {}))
    names.extend(_slot_names(type(value)))
    pydantic_private = getattr(value, '__pydantic_private__', None)
    if pydantic_private:
        names.extend(pydantic_private)
    # dict.fromkeys keeps first-seen order while dropping duplicates
    return [name for name in dict.fromkeys(names) if is_private_name(name)]


def has_custom_eq(cls: type) -> bool:
    """Return True if ``cls`` (or a base other than object) defines ``__eq__``."""
    return cls.__eq__ is not object.__eq__


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slot for slot in slots if slot not in ('__dict__', '__weakref__'))
    return names
