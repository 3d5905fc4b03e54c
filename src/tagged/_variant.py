"""Variant and TaggedValue: a closed set of member types and its one-value container.

A Variant is declared once per shape and is immutable:

    Scalar = Variant(str, int, bool, name="Scalar")

A TaggedValue holds exactly one payload plus the discriminant naming which
member the payload belongs to:
- Discriminant resolution is exact first (type(value) is a member), then by
  isinstance() when exactly one member accepts the value
- Discriminant and payload share one tuple slot, replaced with a single store
  on assign(), so they can never be observed out of step
- try_get() never hands back a payload under the wrong member

Dispatch over a TaggedValue lives in tagged._dispatch.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import structlog

from tagged._types import is_member_type, normalize_member, type_name, type_names

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from tagged._dispatch import HandlerSet
    from tagged._types import Handler

logger = structlog.get_logger()

MAX_ALTERNATIVES = 256


class VariantError(Exception):
    """Errors from variant declaration, construction, and dispatch."""


class TypeMismatchError(VariantError, TypeError):
    """A value or type is not a member of the variant."""

    def __init__(self, variant: Variant, actual: object, detail: str) -> None:
        self.variant = variant
        self.actual = actual
        super().__init__(f"{variant.name}: {detail}")


class InvalidVariantError(VariantError):
    """A member list was empty, duplicated, or not made of classes."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid variant: {source}")


# ═══════════════════════════════════════════════════════════════════════════════
# Variant
# ═══════════════════════════════════════════════════════════════════════════════


class Variant:
    """A closed, ordered set of distinct member types.

    Members are validated at declaration: at least one, no duplicates, only
    plain classes, at most MAX_ALTERNATIVES. Two variants with the same
    members in the same order are equal, whatever their names.

    >>> Scalar = Variant(str, int, bool, name="Scalar")
    >>> Scalar("hello").current_type()
    <class 'str'>
    >>> Scalar(True).current_type()
    <class 'bool'>
    """

    __slots__ = ("_index", "_name", "_types")

    def __init__(self, *types: type | None, name: str | None = None) -> None:
        members = tuple(normalize_member(t) for t in types)
        _check_members(members)

        self._types: tuple[type, ...] = members  # type: ignore[assignment]
        self._name = name or f"Variant[{type_names(members)}]"
        self._index = MappingProxyType({t: i for i, t in enumerate(self._types)})
        logger.debug(
            "variant_declared",
            variant=self._name,
            members=[type_name(t) for t in self._types],
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def types(self) -> tuple[type, ...]:
        """Member types in declaration order (discriminant order)."""
        return self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[type]:
        return iter(self._types)

    def __contains__(self, member: object) -> bool:
        member = normalize_member(member)
        return is_member_type(member) and member in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            return NotImplemented
        return self._types == other._types

    def __hash__(self) -> int:
        return hash(self._types)

    def __repr__(self) -> str:
        return f"<Variant {self._name}: {type_names(self._types)}>"

    def index_of(self, member: type | None) -> int:
        """Discriminant index of a member type.

        Raises:
            TypeMismatchError: member is not part of this variant
        """
        key = normalize_member(member)
        index = self._index.get(key) if is_member_type(key) else None
        if index is None:
            raise TypeMismatchError(
                self,
                member,
                f"{type_name(key)} is not a member "
                f"(members: {type_names(self._types)})",
            )
        return index

    def resolve(self, value: Any) -> int:
        """Discriminant index for a value.

        Exact type first; otherwise the single member the value is an
        instance of. No match, or several, is a TypeMismatchError.
        """
        actual = type(value)
        index = self._index.get(actual)
        if index is not None:
            return index

        candidates = [i for i, t in enumerate(self._types) if isinstance(value, t)]
        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            raise TypeMismatchError(
                self,
                actual,
                f"{type_name(actual)} is not a member "
                f"(members: {type_names(self._types)})",
            )
        matched = [self._types[i] for i in candidates]
        raise TypeMismatchError(
            self,
            actual,
            f"{type_name(actual)} is ambiguous between members {type_names(matched)}",
        )

    def construct(self, value: Any) -> TaggedValue:
        """Wrap a value of one of the member types.

        Raises:
            TypeMismatchError: value belongs to no member, or to several
        """
        return TaggedValue(self, value)

    __call__ = construct

    def handlers[R](self, mapping: Mapping[type | None, Handler[R]]) -> HandlerSet[R]:
        """Assemble a checked HandlerSet from a {member: handler} mapping.

        Shortcut for HandlerSetBuilder(variant).on(...).build().
        """
        from tagged._dispatch import HandlerSetBuilder

        builder: HandlerSetBuilder[R] = HandlerSetBuilder(self)
        for member, handler in mapping.items():
            builder.on(member, handler)
        return builder.build()


def _check_members(members: tuple[object, ...]) -> None:
    if not members:
        raise InvalidVariantError("a variant needs at least one member")
    if len(members) > MAX_ALTERNATIVES:
        raise InvalidVariantError(
            f"{len(members)} members exceeds maximum {MAX_ALTERNATIVES}"
        )
    seen: set[object] = set()
    for member in members:
        if not is_member_type(member):
            raise InvalidVariantError(f"member {member!r} is not a class")
        if member in seen:
            raise InvalidVariantError(f"duplicate member {type_name(member)}")
        seen.add(member)


# ═══════════════════════════════════════════════════════════════════════════════
# TaggedValue
# ═══════════════════════════════════════════════════════════════════════════════


class TaggedValue:
    """Exactly one value of a Variant member, plus its discriminant.

    Usually created through Variant.construct() or by calling the variant.
    Mutable (assign() switches members), so not hashable.
    """

    __slots__ = ("_state", "_variant")

    def __init__(self, variant: Variant, value: Any) -> None:
        self._variant = variant
        self._state: tuple[int, Any] = (variant.resolve(value), value)

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def state(self) -> tuple[int, Any]:
        """(discriminant index, payload), read as one unit."""
        return self._state

    @property
    def index(self) -> int:
        return self._state[0]

    @property
    def value(self) -> Any:
        return self._state[1]

    def current_type(self) -> type:
        """The member type named by the discriminant."""
        return self._variant.types[self._state[0]]

    def holds(self, member: type | None) -> bool:
        return self._variant.index_of(member) == self._state[0]

    def assign(self, value: Any) -> None:
        """Replace the payload, switching member if needed.

        The discriminant is resolved before anything is stored, so a
        rejected value leaves the current state untouched.

        Raises:
            TypeMismatchError: value belongs to no member, or to several
        """
        self._state = (self._variant.resolve(value), value)

    def try_get(self, member: type | None, default: Any = None) -> Any:
        """The payload if the discriminant names `member`, else `default`.

        Raises:
            TypeMismatchError: member is not part of the variant at all
        """
        index, value = self._state
        if self._variant.index_of(member) == index:
            return value
        return default

    def get(self, member: type | None) -> Any:
        """The payload, which must currently be held as `member`.

        Raises:
            TypeMismatchError: discriminant names another member, or
                member is not part of the variant
        """
        index, value = self._state
        if self._variant.index_of(member) != index:
            held = self._variant.types[index]
            raise TypeMismatchError(
                self._variant,
                member,
                f"holds {type_name(held)}, not {type_name(normalize_member(member))}",
            )
        return value

    def dispatch[R](self, handlers: HandlerSet[R]) -> R:
        """Invoke the handler for the held member. See tagged.dispatch()."""
        return handlers(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaggedValue):
            return NotImplemented
        return self._variant == other._variant and self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        index, value = self._state
        return f"{self._variant.name}({type_name(self._variant.types[index])}: {value!r})"
