"""Configuration constants and per-tenant settings for the Amberflo catalog plugin.

Every setting resolves in the same order: tenant override, environment
variable, hard-coded default. Tenant overrides may use either the short key
(e.g. ``apiKey``) or the fully-qualified plugin property name
(``org.killbill.billing.plugin.amberflo.catalog.apiKey``).
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Mapping, Optional

PLUGIN_NAME = "amberflo-catalog"
PROPERTY_PREFIX = "org.killbill.billing.plugin.amberflo.catalog."

CATALOG_NAME = "Amberflo Catalog"
DEFAULT_PRICE_LIST_NAME = "Default"

# Plans outside this locking status are still editable on the vendor side.
READY_LOCKING_STATUS = "close_to_changes"

# Stand-in for an open-ended last tier; the target catalog has no infinity.
UNBOUNDED_TIER_SIZE = 100000.0

DEFAULT_API_KEY = ""
DEFAULT_URL = "https://app.amberflo.io/payments/pricing/amberflo/account-pricing"
DEFAULT_GET_PLANS = "/product-plans/list"
DEFAULT_GET_PRICES = "/product-item-price"
DEFAULT_GET_PRODUCTS = "/product-items/list"
DEFAULT_TIMEOUT_SECONDS = 8.0

# (tenant key, environment variable, default)
_SETTING_SOURCES = {
    "api_key": ("apiKey", "AMBERFLO_KB_APIKEY", DEFAULT_API_KEY),
    "base_url": ("url", "AMBERFLO_KB_URL", DEFAULT_URL),
    "plans_path": ("getPlans", "AMBERFLO_KB_GET_PLANS", DEFAULT_GET_PLANS),
    "prices_path": ("getPrices", "AMBERFLO_KB_GET_PRICES", DEFAULT_GET_PRICES),
    "products_path": ("getProducts", "AMBERFLO_KB_GET_PRODUCTS", DEFAULT_GET_PRODUCTS),
    "timeout_seconds": (
        "timeoutSeconds",
        "AMBERFLO_KB_TIMEOUT_SECONDS",
        str(DEFAULT_TIMEOUT_SECONDS),
    ),
}


@dataclass(frozen=True)
class CatalogSettings:
    """Resolved connection settings for one tenant."""

    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_URL
    plans_path: str = DEFAULT_GET_PLANS
    prices_path: str = DEFAULT_GET_PRICES
    products_path: str = DEFAULT_GET_PRODUCTS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")

    @classmethod
    def from_sources(
        cls,
        overrides: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> CatalogSettings:
        """Build settings from tenant overrides, then the environment, then defaults."""
        overrides = overrides or {}
        env = os.environ if environ is None else environ
        resolved: dict[str, str] = {}
        for field_name, (tenant_key, env_key, default) in _SETTING_SOURCES.items():
            value = _lookup_override(overrides, tenant_key)
            if not value:
                value = (env.get(env_key) or "").strip()
            resolved[field_name] = value or default

        raw_timeout = resolved.pop("timeout_seconds")
        try:
            timeout_seconds = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"Invalid timeout_seconds value: {raw_timeout!r}") from exc
        return cls(timeout_seconds=timeout_seconds, **resolved)


def _lookup_override(overrides: Mapping[str, str], tenant_key: str) -> str:
    for key in (tenant_key, PROPERTY_PREFIX + tenant_key):
        value = overrides.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


class TenantSettingsRegistry:
    """Holds per-tenant property overrides and resolves them into settings."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ
        self._overrides: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def configure(self, tenant_id: Optional[str], properties: Mapping[str, str]) -> None:
        """Replace the override mapping for a tenant (``None`` = process default)."""
        with self._lock:
            self._overrides[_tenant_key(tenant_id)] = dict(properties)

    def settings_for(self, tenant_id: Optional[str] = None) -> CatalogSettings:
        with self._lock:
            overrides = dict(self._overrides.get(_tenant_key(tenant_id), {}))
        return CatalogSettings.from_sources(overrides, self._environ)


def _tenant_key(tenant_id: Optional[str]) -> str:
    return str(tenant_id) if tenant_id is not None else ""
