"""Exhaustive visitor dispatch over TaggedValue.

Handlers are assembled into an immutable HandlerSet before any value flows:
- HandlerSetBuilder[R](variant) → .on(member, fn) ... → .build() → HandlerSet[R]
- build() takes exactly one handler per member, in discriminant order, and
  fails on a missing, unknown, or duplicate handler
- dispatch() is then a single tuple index by the discriminant: no scanning,
  no fallback, no default case

Handlers are keyed by the members themselves. A key that is not a member is
unknown, even when it is a base class of members (object, numbers.Number):
a handler serving several members would be a default case. Likewise a
member's handler never serves another member, so {int, bool} with only an
int handler is missing its bool handler.

Example::

    Scalar = Variant(str, int, bool)
    measure = (
        HandlerSetBuilder(Scalar)
        .on(str, len)
        .on(int, lambda n: n)
        .on(bool, lambda b: not b)
        .build()
    )
    dispatch(Scalar("hello"), measure)  # 5
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from tagged._types import normalize_member, type_name, type_names
from tagged._variant import TypeMismatchError, Variant, VariantError

if TYPE_CHECKING:
    from collections.abc import Callable

    from tagged._types import Handler
    from tagged._variant import TaggedValue

logger = structlog.get_logger()

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class IncompleteHandlersError(VariantError):
    """One or more members have no handler."""

    def __init__(self, variant: Variant, missing: list[type]) -> None:
        self.variant = variant
        self.missing = missing
        super().__init__(f"{variant.name}: no handler for {type_names(missing)}")


class UnknownTypeHandlerError(VariantError):
    """A handler was registered for a type that is not a member."""

    def __init__(self, variant: Variant, key: object) -> None:
        self.variant = variant
        self.key = key
        super().__init__(
            f"{variant.name}: handler for {type_name(key)} matches no member "
            f"(members: {type_names(variant.types)})"
        )


class AmbiguousHandlerError(VariantError):
    """More than one handler was registered for the same member."""

    def __init__(self, variant: Variant, member: type) -> None:
        self.variant = variant
        self.member = member
        super().__init__(
            f"{variant.name}: more than one handler registered for {type_name(member)}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# HandlerSet
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class HandlerSet[R]:
    """Immutable dispatch table: one handler per member, in discriminant order.

    Constructed via HandlerSetBuilder (or Variant.handlers()). Calling the
    set with a TaggedValue dispatches it. `table` is positional, indexed by
    discriminant; building it directly only checks its length.
    """

    variant: Variant
    table: tuple[Handler[R], ...]

    def __post_init__(self) -> None:
        if len(self.table) < len(self.variant):
            missing = list(self.variant.types[len(self.table) :])
            raise IncompleteHandlersError(self.variant, missing)
        if len(self.table) > len(self.variant):
            msg = (
                f"{self.variant.name}: table has {len(self.table)} handlers "
                f"for {len(self.variant)} members"
            )
            raise VariantError(msg)

    def __call__(self, value: TaggedValue) -> R:
        return dispatch(value, self)

    def handler_for(self, member: type | None) -> Handler[R]:
        """The handler resolved for a member."""
        return self.table[self.variant.index_of(member)]


def dispatch[R](value: TaggedValue, handlers: HandlerSet[R]) -> R:
    """Invoke exactly the handler for the member `value` currently holds.

    The handler is called once with the payload and its result returned.
    Exceptions from the handler propagate unchanged.

    Raises:
        TypeMismatchError: handlers were assembled for a different variant
    """
    variant = value.variant
    if handlers.variant is not variant and handlers.variant != variant:
        raise TypeMismatchError(
            variant,
            handlers.variant,
            f"handler set was assembled for {handlers.variant.name}",
        )
    index, payload = value.state
    return handlers.table[index](payload)


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════


class HandlerSetBuilder[R]:
    """Builder for a HandlerSet over one Variant.

    Register handlers with on() (or the register() decorator), then call
    build(). Each registration is checked as it is made; exhaustiveness is
    checked in build(), once.
    """

    def __init__(self, variant: Variant) -> None:
        self._variant = variant
        self._handlers: dict[type, Handler[R]] = {}

    @property
    def variant(self) -> Variant:
        return self._variant

    def on(self, member: type | None, handler: Handler[R]) -> HandlerSetBuilder[R]:
        """Register the handler for one member.

        Raises:
            UnknownTypeHandlerError: member is not part of the variant
            AmbiguousHandlerError: a handler is already registered for it
            TypeError: handler is not callable
        """
        key = normalize_member(member)
        if not callable(handler):
            msg = f"handler for {type_name(key)} is not callable: {handler!r}"
            raise TypeError(msg)
        if key not in self._variant:
            raise UnknownTypeHandlerError(self._variant, key)
        if key in self._handlers:
            raise AmbiguousHandlerError(self._variant, key)  # type: ignore[arg-type]
        self._handlers[key] = handler  # type: ignore[index]
        return self

    def register(self, member: type | None) -> Callable[[Handler[R]], Handler[R]]:
        """Decorator form of on(); returns the function unchanged."""

        def decorator(handler: Handler[R]) -> Handler[R]:
            self.on(member, handler)
            return handler

        return decorator

    def build(self) -> HandlerSet[R]:
        """Freeze the dispatch table.

        Raises:
            IncompleteHandlersError: members left without a handler
        """
        missing = [m for m in self._variant.types if m not in self._handlers]
        if missing:
            raise IncompleteHandlersError(self._variant, missing)
        logger.debug(
            "handler_set_assembled",
            variant=self._variant.name,
            handlers=len(self._handlers),
            members=len(self._variant),
        )
        return HandlerSet(
            variant=self._variant,
            table=tuple(self._handlers[m] for m in self._variant.types),
        )
