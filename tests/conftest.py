"""Shared fixtures and the conformance fixture loader for tagged.

Conformance fixtures live in conformance/NN_*/ as multi-document YAML. Each
document declares a variant by registered type names, optionally a handler
set (type name → handler name from HANDLERS), and cases:

    name: measure_scalar
    alternatives: [str, int, bool]
    handlers: {str: len, int: identity, bool: negate}
    cases:
      - {name: text, value: hello, expect_type: str, expect: 5}

handlers may also be a list of [type name, handler name] pairs, which is how
a document registers the same type twice.

A document-level expect_error names the error raised while declaring the
variant or assembling its handlers; a case-level expect_error names the error
raised while constructing or assigning the case value.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import yaml

from tagged import (
    AmbiguousHandlerError,
    ConfigParseError,
    HandlerSet,
    HandlerSetBuilder,
    IncompleteHandlersError,
    InvalidVariantError,
    TypeMismatchError,
    TypeRegistry,
    TypeRegistryBuilder,
    UnknownTypeHandlerError,
    UnknownTypeNameError,
    Variant,
    register_core_types,
)
from tagged.testing import register

CONFORMANCE_DIR = Path(__file__).resolve().parent.parent / "conformance"

HANDLERS: dict[str, Any] = {
    "len": len,
    "identity": lambda v: v,
    "negate": operator.not_,
    "double": lambda v: v * 2,
    "type_name": lambda v: type(v).__name__,
    "exact_name": lambda v: f"exact:{type(v).__name__}",
}

ERRORS: dict[str, type[Exception]] = {
    "TypeMismatch": TypeMismatchError,
    "IncompleteHandlers": IncompleteHandlersError,
    "UnknownTypeHandler": UnknownTypeHandlerError,
    "AmbiguousHandler": AmbiguousHandlerError,
    "InvalidVariant": InvalidVariantError,
    "UnknownTypeName": UnknownTypeNameError,
    "ConfigParse": ConfigParseError,
}


@dataclass
class ConformanceDoc:
    """One YAML document from a conformance fixture file."""

    source: str
    name: str
    raw: dict[str, Any]
    cases: list[dict[str, Any]] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.source}::{self.name}"


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_conformance_docs() -> list[ConformanceDoc]:
    """Load every conformance document, in directory then file order."""
    docs: list[ConformanceDoc] = []
    if not CONFORMANCE_DIR.exists():
        return docs
    for subdir in sorted(CONFORMANCE_DIR.iterdir()):
        if not subdir.is_dir():
            continue
        for yaml_file in sorted(subdir.glob("*.yaml")):
            docs.extend(_load_file(yaml_file, f"{subdir.name}/{yaml_file.name}"))
    return docs


def _load_file(path: Path, source: str) -> list[ConformanceDoc]:
    docs: list[ConformanceDoc] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            docs.append(
                ConformanceDoc(
                    source=source,
                    name=doc["name"],
                    raw=doc,
                    cases=list(doc.get("cases", [])),
                )
            )
    return docs


# ─── YAML → tagged type conversion ──────────────────────────────────────────


def make_registry() -> TypeRegistry:
    """Core builtins plus the test-domain hierarchy."""
    builder = TypeRegistryBuilder()
    register_core_types(builder)
    register(builder)
    return builder.build()


def declaration(doc: dict[str, Any]) -> dict[str, Any]:
    """The variant-declaration part of a conformance document."""
    return {k: doc[k] for k in ("name", "alternatives") if k in doc}


def assemble_handlers(
    registry: TypeRegistry, variant: Variant, names: dict[str, str] | list[list[str]]
) -> HandlerSet[Any]:
    """Build a HandlerSet from {type: handler} or, to repeat a key, [[type, handler], ...]."""
    pairs = names.items() if isinstance(names, dict) else names
    builder: HandlerSetBuilder[Any] = HandlerSetBuilder(variant)
    for type_name, fn in pairs:
        builder.on(registry.lookup(type_name), HANDLERS[fn])
    return builder.build()


def case_value(registry: TypeRegistry, case: dict[str, Any]) -> Any:
    """A case value: plain YAML scalar, or {type, args} for registered classes."""
    if "construct" in case:
        construct = case["construct"]
        cls = registry.lookup(construct["type"])
        return cls(*construct.get("args", []))
    return case["value"]


# ─── Shared pytest fixtures ─────────────────────────────────────────────────


@pytest.fixture
def registry() -> TypeRegistry:
    return make_registry()


@pytest.fixture
def scalar() -> Variant:
    return Variant(str, int, bool, name="Scalar")


@pytest.fixture
def measure(scalar: Variant) -> HandlerSet[Any]:
    """{str: len, int: identity, bool: negate}."""
    return scalar.handlers({str: len, int: lambda n: n, bool: operator.not_})
