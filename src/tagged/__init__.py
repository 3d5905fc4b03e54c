"""tagged: tagged unions with exhaustive, pre-checked dispatch.

All public types are exported from this module for flat imports:

    from tagged import Variant, HandlerSetBuilder, dispatch
"""

__version__ = "0.1.0"

# Config types, see tagged._config for details
from tagged._config import (
    ConfigParseError,
    VariantConfig,
    parse_variant_config,
    parse_variant_configs,
)

# Dispatch
from tagged._dispatch import (
    AmbiguousHandlerError,
    HandlerSet,
    HandlerSetBuilder,
    IncompleteHandlersError,
    UnknownTypeHandlerError,
    dispatch,
)

# Registry, see tagged._registry for details
from tagged._registry import (
    CORE_TYPES,
    TypeRegistry,
    TypeRegistryBuilder,
    UnknownTypeNameError,
    register_core_types,
)
from tagged._types import Handler

# Variant and value container
from tagged._variant import (
    MAX_ALTERNATIVES,
    InvalidVariantError,
    TaggedValue,
    TypeMismatchError,
    Variant,
    VariantError,
)

__all__ = [
    # Types
    "Handler",
    # Variant
    "Variant",
    "TaggedValue",
    "VariantError",
    "TypeMismatchError",
    "InvalidVariantError",
    "MAX_ALTERNATIVES",
    # Dispatch
    "HandlerSet",
    "HandlerSetBuilder",
    "dispatch",
    "IncompleteHandlersError",
    "UnknownTypeHandlerError",
    "AmbiguousHandlerError",
    # Config types
    "VariantConfig",
    "ConfigParseError",
    "parse_variant_config",
    "parse_variant_configs",
    # Registry
    "TypeRegistryBuilder",
    "TypeRegistry",
    "register_core_types",
    "UnknownTypeNameError",
    "CORE_TYPES",
]
