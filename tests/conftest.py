"""Shared vendor payloads and a fake HTTP opener for catalog tests."""

from __future__ import annotations

import json
from copy import deepcopy
from typing import Any
from urllib.parse import urlencode

import pytest

from amberflo_catalog.catalog.client import VendorClient
from amberflo_catalog.config import CatalogSettings

BASE_URL = "http://amberflo.test"

PLANS_PAYLOAD: list[dict[str, Any]] = [
    {
        "id": "plan-pistol",
        "productId": "1",
        "productItemPriceIdsMap": {},
        "billingPeriod": {"interval": "month", "intervalsCount": 1},
        "productPlanName": "pistol-monthly",
        "description": "",
        "lastUpdateTimeInMillis": 1679937405691,
        "feeMap": {
            "F1": {
                "id": "F1",
                "name": "Pistol",
                "description": "Recurring fee",
                "cost": 29.95,
                "isOneTimeFee": "false",
                "isProrated": True,
                "prorateToDay": True,
                "discountable": False,
                "prepayable": True,
            }
        },
        "lockingStatus": "close_to_changes",
        "isDefault": True,
    },
    {
        "id": "plan-open",
        "productId": "1",
        "productItemPriceIdsMap": {"bullets-item": "price-open"},
        "billingPeriod": {"interval": "year", "intervalsCount": 1},
        "productPlanName": "bullets-usage-in-arrear copy",
        "description": "bullets-usage-in-arrear",
        "lastUpdateTimeInMillis": 1680705818819,
        "feeMap": {},
        "lockingStatus": "open",
    },
    {
        "id": "plan-mixed",
        "productId": "1",
        "productItemPriceIdsMap": {
            "rocks-item": "price-rocks",
            "bullets-item": "price-bullets",
        },
        "billingPeriod": {"interval": "month", "intervalsCount": 1},
        "productPlanName": "mixed",
        "description": "",
        "lastUpdateTimeInMillis": 1680703884631,
        "feeMap": {
            "fee-fixed": {
                "id": "fee-fixed",
                "name": "testFixedRate",
                "cost": 111,
                "isOneTimeFee": False,
            },
            "fee-once": {
                "id": "fee-once",
                "name": "One time",
                "cost": 111,
                "isOneTimeFee": True,
            },
        },
        "lockingStatus": "close_to_changes",
        "prepaidBuyingRules": None,
    },
]

PRODUCT_ITEMS_PAYLOAD: list[dict[str, Any]] = [
    {
        "id": "bullets-item",
        "productId": "1",
        "meterApiName": "BulletsAPI",
        "productItemName": "Bullets",
        "description": "Bullets",
        "lockingStatus": "close_to_changes",
        "lastUpdateTimeInMillis": 1679937775043,
    },
    {
        "id": "rocks-item",
        "productId": "1",
        "meterApiName": "RocksApi",
        "productItemName": "Rocks",
        "description": "",
        "lockingStatus": "close_to_changes",
        "lastUpdateTimeInMillis": 1680533607195,
    },
]

USAGE_PRICES_PAYLOAD: dict[str, dict[str, Any]] = {
    "price-bullets": {
        "id": "price-bullets",
        "productItemId": "bullets-item",
        "price": {
            "type": "LeafNode",
            "tiers": [
                {"startAfterUnit": 0, "batchSize": 10, "pricePerBatch": 2.95},
                {"startAfterUnit": 1000, "batchSize": 100, "pricePerBatch": 5.95},
                {"startAfterUnit": 100000, "batchSize": 1, "pricePerBatch": 0},
            ],
            "allowPartialBatch": True,
        },
        "productItemPriceName": "price-bullets",
        "lockingStatus": "close_to_changes",
        "lastUpdateTimeInMillis": 1680703884632,
    },
    "price-rocks": {
        "id": "price-rocks",
        "productItemId": "rocks-item",
        "price": {
            "type": "PricePerBlockLeafNode",
            "tiers": [{"startAfterUnit": 0, "batchSize": 11, "pricePerBatch": 11}],
            "allowPartialBatch": False,
        },
        "lockingStatus": "close_to_changes",
        "lastUpdateTimeInMillis": 1680703884632,
    },
}


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


class FakeOpener:
    """Stands in for ``urlopen``: serves canned bodies by URL and records requests."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[Any] = []
        self.timeouts: list[float] = []

    def __call__(self, request: Any, timeout: float) -> FakeResponse:
        self.requests.append(request)
        self.timeouts.append(timeout)
        route = self.routes.get(request.full_url)
        if route is None:
            raise AssertionError(f"unexpected request: {request.full_url}")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, bytes):
            return FakeResponse(route)
        return FakeResponse(json.dumps(route).encode("utf-8"))

    def urls(self) -> list[str]:
        return [request.full_url for request in self.requests]


def price_url(price_id: str) -> str:
    return f"{BASE_URL}/prices?{urlencode({'id': price_id})}"


def default_routes() -> dict[str, Any]:
    routes: dict[str, Any] = {
        f"{BASE_URL}/plans": deepcopy(PLANS_PAYLOAD),
        f"{BASE_URL}/products": deepcopy(PRODUCT_ITEMS_PAYLOAD),
    }
    for price_id, payload in USAGE_PRICES_PAYLOAD.items():
        routes[price_url(price_id)] = deepcopy(payload)
    return routes


@pytest.fixture
def settings() -> CatalogSettings:
    return CatalogSettings(
        api_key="test-key",
        base_url=BASE_URL,
        plans_path="/plans",
        prices_path="/prices",
        products_path="/products",
        timeout_seconds=2.5,
    )


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener(default_routes())


@pytest.fixture
def client(settings: CatalogSettings, opener: FakeOpener) -> VendorClient:
    return VendorClient(settings, opener=opener)
