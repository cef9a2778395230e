"""HTTP client for the Amberflo pricing endpoints.

The client performs I/O only: it builds authenticated GET requests, decodes the
JSON body and validates it into vendor contracts. Every call is bounded by the
configured timeout. Failures are raised, never replaced by empty results:

- network, timeout and HTTP status failures -> TransportError
- non-JSON bodies and schema mismatches -> DecodeError
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, TypeVar
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import BaseModel, ValidationError

from amberflo_catalog.config import READY_LOCKING_STATUS, CatalogSettings
from amberflo_catalog.contracts import VendorPlan, VendorProductItem, VendorUsagePrice
from amberflo_catalog.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

Opener = Callable[..., Any]


def validate_plans(plans: list[VendorPlan]) -> list[VendorPlan]:
    """Keep only plans locked against changes on the vendor side, preserving order."""
    return [plan for plan in plans if plan.locking_status == READY_LOCKING_STATUS]


class VendorClient:
    """Fetches plans, product items and usage prices for one tenant's settings."""

    def __init__(self, settings: CatalogSettings, opener: Optional[Opener] = None) -> None:
        self.settings = settings
        self._open = opener or urlopen

    def build_request(self, path: str, params: Optional[dict[str, str]] = None) -> Request:
        url = self.settings.base_url + path
        if params:
            url = f"{url}?{urlencode(params)}"
        headers = {
            "accept": "application/json",
            "X-API-KEY": self.settings.api_key,
        }
        return Request(url, headers=headers, method="GET")

    def _get_json(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        request = self.build_request(path, params)
        url = request.full_url
        logger.debug("GET %s", url)
        try:
            with self._open(request, timeout=self.settings.timeout_seconds) as resp:  # noqa: S310
                body = resp.read()
        except HTTPError as exc:
            raise TransportError(
                f"Amberflo returned HTTP {exc.code} for {url}",
                url=url,
                status=exc.code,
            ) from exc
        except URLError as exc:
            raise TransportError(f"Amberflo request to {url} failed: {exc.reason}", url=url) from exc
        except OSError as exc:
            raise TransportError(f"Amberflo request to {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"Amberflo response from {url} is not valid JSON: {exc}", url=url) from exc

    @staticmethod
    def _decode_list(payload: Any, model: type[ModelT], url: str) -> list[ModelT]:
        if not isinstance(payload, list):
            raise DecodeError(f"Expected a JSON array from {url}", url=url)
        out: list[ModelT] = []
        for idx, row in enumerate(payload):
            try:
                out.append(model.model_validate(row))
            except ValidationError as exc:
                raise DecodeError(
                    f"{url}: invalid {model.__name__} at index {idx}: {exc}",
                    url=url,
                ) from exc
        return out

    def fetch_plans(self) -> list[VendorPlan]:
        """Return every plan whose locking status marks it ready to publish."""
        path = self.settings.plans_path
        plans = self._decode_list(self._get_json(path), VendorPlan, path)
        ready = validate_plans(plans)
        logger.info("Fetched %d plans (%d ready)", len(plans), len(ready))
        return ready

    def fetch_product_items(self) -> list[VendorProductItem]:
        path = self.settings.products_path
        items = self._decode_list(self._get_json(path), VendorProductItem, path)
        logger.info("Fetched %d product items", len(items))
        return items

    def fetch_usage_price(self, price_id: str) -> VendorUsagePrice:
        """Return the tier schedule for one price-id."""
        path = self.settings.prices_path
        payload = self._get_json(path, {"id": price_id})
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object from {path} for price {price_id}", url=path)
        try:
            return VendorUsagePrice.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"{path}: invalid usage price {price_id}: {exc}", url=path) from exc
