"""Assemble translated catalog parts into a versioned snapshot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from amberflo_catalog.catalog.client import VendorClient
from amberflo_catalog.catalog.schema import StandaloneCatalog, VersionedCatalog
from amberflo_catalog.catalog.translator import TranslationResult, translate_catalog
from amberflo_catalog.config import CATALOG_NAME

logger = logging.getLogger(__name__)


def assemble_catalog(result: TranslationResult, catalog_name: str = CATALOG_NAME) -> VersionedCatalog:
    """Wrap one translation result as the single version of a versioned catalog."""
    standalone = StandaloneCatalog(
        catalog_name=catalog_name,
        effective_date=result.effective_date,
        currencies=result.currencies,
        units=result.units,
        products=result.products,
        plans=result.plans,
        default_price_list=result.price_list,
        plan_rules=result.plan_rules,
    )
    return VersionedCatalog(catalog_name=catalog_name, versions=(standalone,))


def build_catalog(client: VendorClient, now: Optional[datetime] = None) -> VersionedCatalog:
    """Fetch, translate and assemble a full catalog snapshot."""
    plans = client.fetch_plans()
    items = client.fetch_product_items()
    result = translate_catalog(plans, items, client.fetch_usage_price, now=now)
    catalog = assemble_catalog(result)
    logger.info(
        "Built catalog with %d plans, %d products, %d units (%d entries skipped)",
        len(result.plans),
        len(result.products),
        len(result.units),
        len(result.skipped),
    )
    return catalog
