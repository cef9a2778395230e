"""Amberflo catalog translation: client, translator, assembler and service."""

from amberflo_catalog.catalog.assembler import assemble_catalog, build_catalog
from amberflo_catalog.catalog.billing_period import (
    billing_period_for,
    display_suffix,
    parse_interval,
)
from amberflo_catalog.catalog.client import VendorClient, validate_plans
from amberflo_catalog.catalog.service import CatalogService
from amberflo_catalog.catalog.sync import sync_catalog, validate_catalog_payload
from amberflo_catalog.catalog.translator import (
    DEFAULT_PLAN_RULES,
    TranslationResult,
    compute_block_sizes,
    translate_catalog,
)

__all__ = [
    "DEFAULT_PLAN_RULES",
    "CatalogService",
    "TranslationResult",
    "VendorClient",
    "assemble_catalog",
    "billing_period_for",
    "build_catalog",
    "compute_block_sizes",
    "display_suffix",
    "parse_interval",
    "sync_catalog",
    "translate_catalog",
    "validate_catalog_payload",
    "validate_plans",
]
