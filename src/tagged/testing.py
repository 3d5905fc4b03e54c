"""Test utilities for tagged.

Provides recording handlers for asserting dispatch behaviour, and a tiny
test-domain class hierarchy for exercising subclass resolution. These are
NOT part of any real domain; they exist to reduce boilerplate in tests and
examples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tagged._dispatch import HandlerSetBuilder

if TYPE_CHECKING:
    from tagged._dispatch import HandlerSet
    from tagged._registry import TypeRegistryBuilder
    from tagged._variant import Variant


@dataclass(slots=True)
class RecordingHandler:
    """Handler that records every payload it receives.

    Returns its own member type, so a dispatch result says which handler ran.

    >>> from tagged import Variant
    >>> from tagged.testing import recording_handlers
    >>> Scalar = Variant(str, int)
    >>> handlers, recorders = recording_handlers(Scalar)
    >>> handlers(Scalar("hi"))
    <class 'str'>
    >>> recorders[str].calls
    ['hi']
    """

    member: type
    calls: list[Any] = field(default_factory=list)

    def __call__(self, value: Any) -> type:
        self.calls.append(value)
        return self.member

    @property
    def call_count(self) -> int:
        return len(self.calls)


def recording_handlers(
    variant: Variant,
) -> tuple[HandlerSet[type], dict[type, RecordingHandler]]:
    """Build a complete HandlerSet of RecordingHandlers, one per member."""
    recorders = {member: RecordingHandler(member) for member in variant.types}
    builder: HandlerSetBuilder[type] = HandlerSetBuilder(variant)
    for member, recorder in recorders.items():
        builder.on(member, recorder)
    return builder.build(), recorders


def total_calls(recorders: dict[type, RecordingHandler]) -> int:
    return sum(r.call_count for r in recorders.values())


# ── Test-domain types ───────────────────────────────────────────────────────


class Shape:
    """Base of the test-domain hierarchy."""


class Labeled:
    """Mixin; Circle is both a Shape and Labeled."""


@dataclass(frozen=True, slots=True)
class Circle(Shape, Labeled):
    radius: float


@dataclass(frozen=True, slots=True)
class Square(Shape):
    side: float


def register(builder: TypeRegistryBuilder) -> TypeRegistryBuilder:
    """Register the test-domain types.

    Names: test.Shape, test.Labeled, test.Circle, test.Square.
    """
    return (
        builder.register("test.Shape", Shape)
        .register("test.Labeled", Labeled)
        .register("test.Circle", Circle)
        .register("test.Square", Square)
    )
