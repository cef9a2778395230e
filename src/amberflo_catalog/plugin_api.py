"""Catalog plugin entry points called by the billing host."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from amberflo_catalog.catalog.schema import VersionedCatalog
from amberflo_catalog.catalog.service import CatalogService

REFRESH_ACK = "Catalog Refreshed"


@dataclass(frozen=True)
class TenantContext:
    tenant_id: Optional[str] = None


@dataclass(frozen=True)
class PluginProperty:
    key: str
    value: object = None
    is_updatable: bool = False


class CatalogPluginApi:
    """Host-facing catalog API; plugin properties are accepted but not used."""

    def __init__(self, service: Optional[CatalogService] = None) -> None:
        self.service = service or CatalogService()

    def get_latest_catalog_version(
        self,
        properties: Iterable[PluginProperty],
        tenant_context: TenantContext,
    ) -> datetime:
        return self.service.get_latest_version(tenant_context.tenant_id)

    def get_versioned_plugin_catalog(
        self,
        properties: Iterable[PluginProperty],
        tenant_context: TenantContext,
    ) -> VersionedCatalog:
        return self.service.get_catalog(tenant_context.tenant_id)

    def refresh(self, tenant_context: Optional[TenantContext] = None) -> str:
        """Rebuild the tenant's catalog and publish a new version marker."""
        tenant_id = tenant_context.tenant_id if tenant_context else None
        self.service.force_refresh(tenant_id)
        return REFRESH_ACK
