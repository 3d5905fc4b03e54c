"""Core type aliases and member helpers for tagged.

- A member is one alternative of a Variant: a plain class
- A Handler is a one-argument callable invoked with the payload of its member
- None is accepted wherever a member is expected and means NoneType
"""

from __future__ import annotations

from collections.abc import Callable
from types import GenericAlias, NoneType
from typing import Any

type Handler[R] = Callable[[Any], R]


def normalize_member(member: object) -> object:
    """Map the None shorthand to NoneType; leave everything else alone."""
    if member is None:
        return NoneType
    return member


def is_member_type(member: object) -> bool:
    """True for plain classes usable with isinstance/issubclass.

    Parameterized generics (list[int]) are rejected: isinstance() cannot
    check them, so they cannot act as a discriminant.
    """
    return isinstance(member, type) and not isinstance(member, GenericAlias)


def type_name(member: object) -> str:
    """Readable name for error messages and logs."""
    if member is NoneType:
        return "None"
    if isinstance(member, type):
        return member.__qualname__
    return repr(member)


def type_names(members: tuple[object, ...] | list[object]) -> str:
    return ", ".join(type_name(m) for m in members)
