"""Vendor payload contracts and target-catalog enums.

Raw Amberflo payloads are decoded into the Pydantic models below at the client
boundary, so the translator only ever sees validated, snake_case objects.
Unknown vendor fields are ignored; nullable maps and strings are normalized to
empty values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Target catalog enums
# =============================================================================


class Currency(str, Enum):
    USD = "USD"


class ProductCategory(str, Enum):
    BASE = "BASE"
    ADD_ON = "ADD_ON"
    STANDALONE = "STANDALONE"


class BillingPeriod(str, Enum):
    """Recurring billing cadence of a plan or usage section."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"
    NO_BILLING_PERIOD = "NO_BILLING_PERIOD"


class PhaseType(str, Enum):
    """Phase shapes used by this catalog.

    - FIXEDTERM: bounded phase, used for one-time fees (1 day)
    - EVERGREEN: unlimited phase, used for recurring fees and usage
    """

    FIXEDTERM = "FIXEDTERM"
    EVERGREEN = "EVERGREEN"


class TimeUnit(str, Enum):
    DAYS = "DAYS"
    MONTHS = "MONTHS"
    YEARS = "YEARS"
    UNLIMITED = "UNLIMITED"


class BillingMode(str, Enum):
    IN_ADVANCE = "IN_ADVANCE"
    IN_ARREAR = "IN_ARREAR"


class UsageType(str, Enum):
    CAPACITY = "CAPACITY"
    CONSUMABLE = "CONSUMABLE"


class BillingActionPolicy(str, Enum):
    START_OF_TERM = "START_OF_TERM"
    END_OF_TERM = "END_OF_TERM"
    IMMEDIATE = "IMMEDIATE"


class BillingAlignment(str, Enum):
    ACCOUNT = "ACCOUNT"
    BUNDLE = "BUNDLE"
    SUBSCRIPTION = "SUBSCRIPTION"


class PlanAlignmentCreate(str, Enum):
    START_OF_BUNDLE = "START_OF_BUNDLE"
    START_OF_SUBSCRIPTION = "START_OF_SUBSCRIPTION"


class PlanAlignmentChange(str, Enum):
    START_OF_BUNDLE = "START_OF_BUNDLE"
    START_OF_SUBSCRIPTION = "START_OF_SUBSCRIPTION"
    CHANGE_OF_PLAN = "CHANGE_OF_PLAN"


# =============================================================================
# Vendor payloads
# =============================================================================


class _VendorModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class VendorFee(_VendorModel):
    """One flat fee from a plan's ``feeMap``.

    ``isOneTimeFee`` arrives as a JSON boolean or a string depending on the
    endpoint version, so it is kept as text and parsed by the translator.
    """

    id: str
    name: str
    cost: float
    is_one_time_fee: str = Field(default="false", alias="isOneTimeFee")
    is_prorated: Optional[bool] = Field(default=None, alias="isProrated")
    prorate_to_day: Optional[bool] = Field(default=None, alias="prorateToDay")
    discountable: Optional[bool] = None
    prepayable: Optional[bool] = None

    @field_validator("is_one_time_fee", mode="before")
    @classmethod
    def coerce_flag_text(cls, v: Any) -> str:
        if v is None:
            return "false"
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class VendorBillingInterval(_VendorModel):
    interval: Optional[str] = None
    intervals_count: Optional[int] = Field(default=None, alias="intervalsCount")


class VendorPlan(_VendorModel):
    """A product plan as listed by the plans endpoint."""

    id: str
    product_id: str = Field(default="", alias="productId")
    product_plan_name: str = Field(default="", alias="productPlanName")
    description: str = ""
    billing_period: Optional[VendorBillingInterval] = Field(default=None, alias="billingPeriod")
    fee_map: dict[str, VendorFee] = Field(default_factory=dict, alias="feeMap")
    product_item_price_ids_map: dict[str, str] = Field(
        default_factory=dict,
        alias="productItemPriceIdsMap",
    )
    locking_status: str = Field(default="", alias="lockingStatus")
    last_update_time_in_millis: Optional[int] = Field(
        default=None,
        alias="lastUpdateTimeInMillis",
    )

    @field_validator("fee_map", "product_item_price_ids_map", mode="before")
    @classmethod
    def null_map_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("product_id", "product_plan_name", "description", "locking_status", mode="before")
    @classmethod
    def null_text_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def interval(self) -> str:
        """Free-text billing interval as sent; empty when the vendor omits it."""
        if self.billing_period is None or not self.billing_period.interval:
            return ""
        return self.billing_period.interval


class VendorProductItem(_VendorModel):
    """A metered product item; its meter name becomes the catalog unit."""

    id: str
    product_id: str = Field(default="", alias="productId")
    meter_api_name: str = Field(alias="meterApiName")
    product_item_name: str = Field(alias="productItemName")
    description: Optional[str] = None
    locking_status: Optional[str] = Field(default=None, alias="lockingStatus")


class VendorUsageTier(_VendorModel):
    start_after_unit: float = Field(alias="startAfterUnit")
    batch_size: float = Field(alias="batchSize")
    price_per_batch: float = Field(alias="pricePerBatch")


class VendorUsagePrice(_VendorModel):
    """Tier schedule for one price-id.

    The endpoint nests the schedule under ``price``; it is flattened here so
    callers read ``tiers`` and ``allow_partial_batch`` directly.
    """

    id: str = ""
    product_item_id: str = Field(default="", alias="productItemId")
    price_type: str = Field(default="", alias="type")
    tiers: list[VendorUsageTier] = Field(default_factory=list)
    allow_partial_batch: bool = Field(default=False, alias="allowPartialBatch")

    @model_validator(mode="before")
    @classmethod
    def flatten_price(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        price = data.get("price")
        if price is None:
            return data
        if not isinstance(price, dict):
            raise ValueError("price must be an object")
        flattened = {key: value for key, value in data.items() if key != "price"}
        for key in ("type", "tiers", "allowPartialBatch"):
            if key in price and price[key] is not None:
                flattened[key] = price[key]
        return flattened
