from __future__ import annotations

import pytest

from amberflo_catalog.config import (
    DEFAULT_GET_PLANS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_URL,
    PROPERTY_PREFIX,
    CatalogSettings,
    TenantSettingsRegistry,
)


def test_settings_fall_back_to_defaults_when_unset() -> None:
    settings = CatalogSettings.from_sources({}, environ={})
    assert settings.api_key == ""
    assert settings.base_url == DEFAULT_URL
    assert settings.plans_path == DEFAULT_GET_PLANS
    assert settings.prices_path == "/product-item-price"
    assert settings.products_path == "/product-items/list"
    assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS


def test_environment_overrides_defaults() -> None:
    env = {
        "AMBERFLO_KB_APIKEY": "env-key",
        "AMBERFLO_KB_URL": "https://env.example",
        "AMBERFLO_KB_TIMEOUT_SECONDS": "3",
    }
    settings = CatalogSettings.from_sources({}, environ=env)
    assert settings.api_key == "env-key"
    assert settings.base_url == "https://env.example"
    assert settings.timeout_seconds == 3.0


def test_tenant_override_wins_over_environment() -> None:
    env = {"AMBERFLO_KB_APIKEY": "env-key", "AMBERFLO_KB_GET_PLANS": "/env-plans"}
    overrides = {"apiKey": "tenant-key", PROPERTY_PREFIX + "getPlans": "/tenant-plans"}
    settings = CatalogSettings.from_sources(overrides, environ=env)
    assert settings.api_key == "tenant-key"
    assert settings.plans_path == "/tenant-plans"


def test_blank_override_falls_through() -> None:
    settings = CatalogSettings.from_sources({"apiKey": "  "}, environ={"AMBERFLO_KB_APIKEY": "env-key"})
    assert settings.api_key == "env-key"


@pytest.mark.parametrize("raw", ["0", "-1", "soon"])
def test_invalid_timeout_is_rejected(raw: str) -> None:
    with pytest.raises(ValueError):
        CatalogSettings.from_sources({"timeoutSeconds": raw}, environ={})


def test_registry_scopes_overrides_per_tenant() -> None:
    registry = TenantSettingsRegistry(environ={})
    registry.configure("tenant-a", {"apiKey": "key-a"})
    assert registry.settings_for("tenant-a").api_key == "key-a"
    assert registry.settings_for("tenant-b").api_key == ""
    assert registry.settings_for(None).api_key == ""
