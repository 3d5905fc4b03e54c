"""Config types for declaring variants from data.

Config-driven variant declaration path:
  dict → parse_variant_config() → VariantConfig → TypeRegistry.load_variant() → Variant

The same dict shape works whether it came from JSON, YAML, or Python:

    {"name": "Scalar", "alternatives": ["str", "int", "bool"]}

A document of several variants wraps them in a "variants" list:

    {"variants": [{"name": "Scalar", "alternatives": [...]}, ...]}

Type names are resolved by a TypeRegistry, never imported dynamically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariantConfig:
    """A named variant declared by registered type names, in discriminant order."""

    name: str
    alternatives: tuple[str, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


def parse_variant_config(data: dict[str, Any]) -> VariantConfig:
    """Parse a dict into a VariantConfig.

    Only the shape is checked here; whether the names resolve and form a
    valid variant is up to TypeRegistry.load_variant().

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    name = data.get("name")
    if name is None:
        msg = "variant missing required field 'name'"
        raise ConfigParseError(msg)
    if not isinstance(name, str) or not name:
        msg = f"'name' must be a non-empty string, got {name!r}"
        raise ConfigParseError(msg)

    raw = data.get("alternatives")
    if raw is None:
        msg = f"variant {name!r} missing required field 'alternatives'"
        raise ConfigParseError(msg)
    if not isinstance(raw, list):
        msg = f"'alternatives' must be a list, got {type(raw).__name__}"
        raise ConfigParseError(msg)

    for alt in raw:
        if not isinstance(alt, str):
            msg = (
                f"variant {name!r}: alternatives must be type name strings, "
                f"got {type(alt).__name__}"
            )
            raise ConfigParseError(msg)

    unknown = sorted(set(data) - {"name", "alternatives"})
    if unknown:
        msg = f"variant {name!r}: unknown fields {unknown}"
        raise ConfigParseError(msg)

    return VariantConfig(name=name, alternatives=tuple(raw))


def parse_variant_configs(data: dict[str, Any]) -> tuple[VariantConfig, ...]:
    """Parse a {"variants": [...]} document.

    Raises:
        ConfigParseError: If the document or any entry is malformed, or two
            entries share a name.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw = data.get("variants")
    if raw is None:
        msg = "missing required field 'variants'"
        raise ConfigParseError(msg)
    if not isinstance(raw, list):
        msg = f"'variants' must be a list, got {type(raw).__name__}"
        raise ConfigParseError(msg)

    configs = tuple(parse_variant_config(entry) for entry in raw)

    seen: set[str] = set()
    for config in configs:
        if config.name in seen:
            msg = f"duplicate variant name {config.name!r}"
            raise ConfigParseError(msg)
        seen.add(config.name)
    return configs
