"""Amberflo catalog plugin.

Translates an Amberflo pricing catalog (plans, fees, product items and tiered
usage prices) into a versioned billing catalog of products, plans, phases,
usages and tiers.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from amberflo_catalog.catalog import (
    DEFAULT_PLAN_RULES,
    CatalogService,
    TranslationResult,
    VendorClient,
    assemble_catalog,
    build_catalog,
    compute_block_sizes,
    parse_interval,
    sync_catalog,
    translate_catalog,
    validate_catalog_payload,
    validate_plans,
)
from amberflo_catalog.config import CatalogSettings, TenantSettingsRegistry
from amberflo_catalog.errors import CatalogError, DecodeError, MappingError, TransportError
from amberflo_catalog.plugin_api import CatalogPluginApi, PluginProperty, TenantContext

__all__ = [
    # Version
    "__version__",
    # Configuration
    "CatalogSettings",
    "TenantSettingsRegistry",
    # Errors
    "CatalogError",
    "DecodeError",
    "MappingError",
    "TransportError",
    # Translation pipeline
    "VendorClient",
    "validate_plans",
    "translate_catalog",
    "compute_block_sizes",
    "parse_interval",
    "TranslationResult",
    "DEFAULT_PLAN_RULES",
    "assemble_catalog",
    "build_catalog",
    "sync_catalog",
    "validate_catalog_payload",
    # Service and host API
    "CatalogService",
    "CatalogPluginApi",
    "PluginProperty",
    "TenantContext",
]
