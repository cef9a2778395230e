from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from jsonschema import Draft202012Validator

from amberflo_catalog.catalog.assembler import assemble_catalog, build_catalog
from amberflo_catalog.catalog.client import VendorClient
from amberflo_catalog.catalog.sync import (
    SCHEMA_VERSION,
    SNAPSHOT_SCHEMA_PATH,
    snapshot_payload,
    sync_catalog,
    validate_catalog_payload,
)
from amberflo_catalog.catalog.translator import translate_catalog
from amberflo_catalog.config import CATALOG_NAME
from amberflo_catalog.errors import TransportError

from conftest import BASE_URL, FakeOpener, default_routes, price_url


def test_build_catalog_wraps_single_version(client, opener) -> None:
    catalog = build_catalog(client)
    assert catalog.catalog_name == CATALOG_NAME == "Amberflo Catalog"
    assert len(catalog.versions) == 1
    current = catalog.current
    assert current.catalog_name == CATALOG_NAME
    assert len(current.plans) == 5
    assert len(current.products) == 5
    assert len(current.units) == 2
    assert current.default_price_list.plans == current.plans
    assert catalog.effective_date == datetime.fromtimestamp(1679937405691 / 1000, tz=timezone.utc)


def test_build_catalog_fetches_each_endpoint_once(client, opener) -> None:
    build_catalog(client)
    urls = opener.urls()
    assert urls.count(f"{BASE_URL}/plans") == 1
    assert urls.count(f"{BASE_URL}/products") == 1
    assert urls.count(price_url("price-bullets")) == 1
    assert urls.count(price_url("price-rocks")) == 1
    assert len(urls) == 4


def test_build_catalog_propagates_price_failures(settings) -> None:
    routes = default_routes()
    routes[price_url("price-rocks")] = TimeoutError("timed out")
    client = VendorClient(settings, opener=FakeOpener(routes))
    with pytest.raises(TransportError):
        build_catalog(client)


def test_assemble_catalog_accepts_empty_translation() -> None:
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    catalog = assemble_catalog(translate_catalog([], [], lambda price_id: None, now=now))
    assert catalog.current.plans == ()
    assert catalog.effective_date == now
    validate_catalog_payload(catalog.to_dict())


def test_catalog_payload_matches_snapshot_schema(client) -> None:
    payload = build_catalog(client).to_dict()
    schema = json.loads(SNAPSHOT_SCHEMA_PATH.read_text(encoding="utf-8"))
    errors = list(Draft202012Validator(schema).iter_errors(payload))
    assert not errors


def test_validate_catalog_payload_rejects_phase_with_recurring_and_usages(client) -> None:
    payload = build_catalog(client).to_dict()
    plans = payload["versions"][0]["plans"]
    fee_plan = next(plan for plan in plans if plan["final_phase"]["recurring"] is not None)
    usage_plan = next(plan for plan in plans if plan["final_phase"]["usages"])
    fee_plan["final_phase"]["usages"] = usage_plan["final_phase"]["usages"]
    with pytest.raises(ValueError, match="schema validation"):
        validate_catalog_payload(payload)


def test_snapshot_payload_summarizes_catalog(client) -> None:
    payload = snapshot_payload(build_catalog(client))
    assert payload["schema_version"] == SCHEMA_VERSION
    assert payload["plan_count"] == 5
    assert payload["product_count"] == 5
    assert payload["unit_count"] == 2
    assert payload["effective_date"].startswith("2023-03-27T")
    assert payload["catalog"]["catalog_name"] == "Amberflo Catalog"


def test_sync_catalog_writes_snapshot(client, tmp_path) -> None:
    output_path = tmp_path / "snapshots" / "catalog.json"
    payload = sync_catalog(client=client, output_path=output_path)
    assert output_path.exists()
    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert written["plan_count"] == payload["plan_count"] == 5
    units = written["catalog"]["versions"][0]["units"]
    assert {unit["name"] for unit in units} == {"BulletsAPI", "RocksApi"}


def test_negative_batch_size_does_not_abort_refresh(settings) -> None:
    routes = default_routes()
    routes[price_url("price-rocks")]["price"]["tiers"][0]["batchSize"] = -1
    catalog = build_catalog(VendorClient(settings, opener=FakeOpener(routes)))
    names = {plan.name for plan in catalog.current.plans}
    assert "price-rocks" not in names
    assert {"F1_Pistol", "price-bullets"} <= names
    assert len(catalog.current.plans) == 4
    validate_catalog_payload(catalog.to_dict())
