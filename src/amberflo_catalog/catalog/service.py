"""Process-wide holder of the latest catalog snapshot and version marker."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from amberflo_catalog.catalog.assembler import build_catalog
from amberflo_catalog.catalog.client import VendorClient
from amberflo_catalog.catalog.schema import VersionedCatalog
from amberflo_catalog.config import CatalogSettings, TenantSettingsRegistry
from amberflo_catalog.errors import CatalogError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[CatalogSettings], VendorClient]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CatalogState:
    version: datetime
    catalog: Optional[VersionedCatalog] = None


class CatalogService:
    """Serves catalog versions per tenant and rebuilds them on demand.

    Reading the version marker never performs I/O. Rebuilds for the same tenant
    are serialized, and a rebuild only replaces the cached state once the new
    snapshot is complete, so a failed refresh leaves the previous marker in place.
    """

    def __init__(
        self,
        registry: Optional[TenantSettingsRegistry] = None,
        client_factory: ClientFactory = VendorClient,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.registry = registry or TenantSettingsRegistry()
        self._client_factory = client_factory
        self._clock = clock
        self._started_at = clock()
        self._states: dict[str, CatalogState] = {}
        self._state_guard = threading.Lock()
        self._refresh_locks: dict[str, threading.Lock] = {}

    @staticmethod
    def _key(tenant_id: Optional[str]) -> str:
        return str(tenant_id) if tenant_id is not None else ""

    def _state(self, key: str) -> CatalogState:
        with self._state_guard:
            return self._states.get(key) or CatalogState(version=self._started_at)

    def _publish(self, key: str, state: CatalogState) -> None:
        with self._state_guard:
            self._states[key] = state

    def _refresh_lock(self, key: str) -> threading.Lock:
        with self._state_guard:
            return self._refresh_locks.setdefault(key, threading.Lock())

    def get_latest_version(self, tenant_id: Optional[str] = None) -> datetime:
        return self._state(self._key(tenant_id)).version

    def get_cached_catalog(self, tenant_id: Optional[str] = None) -> Optional[VersionedCatalog]:
        return self._state(self._key(tenant_id)).catalog

    def _build(self, tenant_id: Optional[str]) -> VersionedCatalog:
        client = self._client_factory(self.registry.settings_for(tenant_id))
        try:
            return build_catalog(client)
        except CatalogError as exc:
            logger.warning(
                "Catalog refresh failed for tenant %r (%s): %s",
                tenant_id,
                type(exc).__name__,
                exc,
            )
            raise

    def get_catalog(self, tenant_id: Optional[str] = None) -> VersionedCatalog:
        """Fetch and translate a fresh catalog; the version marker is left unchanged."""
        key = self._key(tenant_id)
        with self._refresh_lock(key):
            catalog = self._build(tenant_id)
            self._publish(key, CatalogState(version=self._state(key).version, catalog=catalog))
        return catalog

    def force_refresh(self, tenant_id: Optional[str] = None) -> datetime:
        """Rebuild the catalog and publish a new version marker on success."""
        key = self._key(tenant_id)
        with self._refresh_lock(key):
            catalog = self._build(tenant_id)
            version = self._clock()
            self._publish(key, CatalogState(version=version, catalog=catalog))
        logger.info("Catalog refreshed for tenant %r; version %s", tenant_id, version.isoformat())
        return version
