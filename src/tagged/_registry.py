"""Type registry for config-driven variant declaration.

The registry maps the type names used in config documents to Python classes,
so variant shapes can live in JSON/YAML without importing anything by name:
- TypeRegistryBuilder → .build() → TypeRegistry (immutable)
- load_variant() resolves a VariantConfig into a Variant

Example::

    builder = TypeRegistryBuilder()
    register_core_types(builder)
    builder.register("app.Money", Money)
    registry = builder.build()

    config = parse_variant_config(yaml.safe_load(text))
    Amount = registry.load_variant(config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType, NoneType
from typing import TYPE_CHECKING

import structlog

from tagged._types import is_member_type, type_name
from tagged._variant import InvalidVariantError, Variant, VariantError

if TYPE_CHECKING:
    from tagged._config import VariantConfig

logger = structlog.get_logger()

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownTypeNameError(VariantError):
    """A config named a type that was not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.type_name = name
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown type name: {name!r} (registered: {registered})"
        else:
            msg = f"unknown type name: {name!r} (no types are registered)"
        super().__init__(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

# Names used by register_core_types(); "none" is NoneType.
CORE_TYPES: MappingProxyType[str, type] = MappingProxyType(
    {
        "str": str,
        "int": int,
        "float": float,
        "bool": bool,
        "bytes": bytes,
        "none": NoneType,
        "list": list,
        "dict": dict,
        "tuple": tuple,
    }
)


class TypeRegistryBuilder:
    """Builder for constructing a TypeRegistry.

    Register classes under config names, then call build() to produce an
    immutable TypeRegistry. Registering the same name twice is allowed only
    for the same class.
    """

    def __init__(self) -> None:
        self._types: dict[str, type] = {}

    def register(self, name: str, cls: type) -> TypeRegistryBuilder:
        """Register a class under a config name.

        Raises:
            InvalidVariantError: cls is not a class, or name is taken by
                another class
        """
        if not is_member_type(cls):
            raise InvalidVariantError(f"type name {name!r} registered with non-class {cls!r}")
        existing = self._types.get(name)
        if existing is not None and existing is not cls:
            raise InvalidVariantError(
                f"type name {name!r} already registered as {type_name(existing)}"
            )
        self._types[name] = cls
        return self

    def build(self) -> TypeRegistry:
        """Freeze the registry. No further registration is possible."""
        return TypeRegistry(_types=MappingProxyType(dict(self._types)))


def register_core_types(builder: TypeRegistryBuilder) -> TypeRegistryBuilder:
    """Register the builtin scalar and container types (see CORE_TYPES)."""
    for name, cls in CORE_TYPES.items():
        builder.register(name, cls)
    return builder


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypeRegistry:
    """Immutable name → class registry.

    Constructed via TypeRegistryBuilder. Use load_variant() to turn config
    into a runtime Variant.
    """

    _types: MappingProxyType[str, type] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_variant(self, config: VariantConfig) -> Variant:
        """Load a Variant from configuration.

        Raises:
            UnknownTypeNameError: an alternative is not registered
            InvalidVariantError: alternatives empty, duplicated, or too many
        """
        members = tuple(self.lookup(alt) for alt in config.alternatives)
        variant = Variant(*members, name=config.name)
        logger.debug(
            "variant_loaded",
            variant=config.name,
            alternatives=list(config.alternatives),
        )
        return variant

    def load_variants(self, configs: tuple[VariantConfig, ...]) -> dict[str, Variant]:
        """Load several variants, keyed by name."""
        variants: dict[str, Variant] = {}
        for config in configs:
            if config.name in variants:
                raise InvalidVariantError(f"duplicate variant name {config.name!r}")
            variants[config.name] = self.load_variant(config)
        return variants

    def lookup(self, name: str) -> type:
        """Resolve a registered name to its class.

        Raises:
            UnknownTypeNameError: name is not registered
        """
        cls = self._types.get(name)
        if cls is None:
            raise UnknownTypeNameError(name, list(self._types.keys()))
        return cls

    @property
    def type_count(self) -> int:
        """Number of registered types."""
        return len(self._types)

    def contains(self, name: str) -> bool:
        """Check if a type name is registered."""
        return name in self._types

    def type_names(self) -> list[str]:
        """Return all registered type names (sorted)."""
        return sorted(self._types.keys())
