"""Immutable entities of the translated billing catalog."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from amberflo_catalog.contracts import (
    BillingActionPolicy,
    BillingAlignment,
    BillingMode,
    BillingPeriod,
    Currency,
    PhaseType,
    PlanAlignmentChange,
    PlanAlignmentCreate,
    ProductCategory,
    TimeUnit,
    UsageType,
)

UNLIMITED_DURATION_NUMBER = -1


def _to_primitive(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_primitive(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, frozenset):
        items = [_to_primitive(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
    if isinstance(value, (list, tuple)):
        return [_to_primitive(item) for item in value]
    return value


class _CatalogEntity:
    def to_dict(self) -> dict[str, object]:
        payload = _to_primitive(self)
        assert isinstance(payload, dict)
        return payload


@dataclass(frozen=True)
class Duration(_CatalogEntity):
    unit: TimeUnit
    number: int = UNLIMITED_DURATION_NUMBER

    def __post_init__(self) -> None:
        if self.unit == TimeUnit.UNLIMITED and self.number != UNLIMITED_DURATION_NUMBER:
            raise ValueError("UNLIMITED durations carry no number")
        if self.unit != TimeUnit.UNLIMITED and self.number < 1:
            raise ValueError("bounded durations must be >= 1")

    @classmethod
    def unlimited(cls) -> Duration:
        return cls(unit=TimeUnit.UNLIMITED)


@dataclass(frozen=True)
class Price(_CatalogEntity):
    currency: Currency
    value: float


@dataclass(frozen=True)
class InternationalPrice(_CatalogEntity):
    prices: tuple[Price, ...]
    is_zero: bool = False

    def __post_init__(self) -> None:
        if not self.prices:
            raise ValueError("an international price needs at least one currency")

    @classmethod
    def usd(cls, value: float) -> InternationalPrice:
        return cls(prices=(Price(currency=Currency.USD, value=float(value)),), is_zero=False)


@dataclass(frozen=True)
class Recurring(_CatalogEntity):
    billing_period: BillingPeriod
    recurring_price: InternationalPrice


@dataclass(frozen=True)
class Unit(_CatalogEntity):
    name: str
    display_name: str


@dataclass(frozen=True)
class TieredBlock(_CatalogEntity):
    unit: Unit
    size: float
    price: InternationalPrice
    max: float


@dataclass(frozen=True)
class Tier(_CatalogEntity):
    tiered_blocks: tuple[TieredBlock, ...]

    def __post_init__(self) -> None:
        if not self.tiered_blocks:
            raise ValueError("a tier needs at least one tiered block")


@dataclass(frozen=True)
class Usage(_CatalogEntity):
    name: str
    billing_period: BillingPeriod
    tiers: tuple[Tier, ...]
    billing_mode: BillingMode = BillingMode.IN_ARREAR
    usage_type: UsageType = UsageType.CONSUMABLE

    def __post_init__(self) -> None:
        if not self.tiers:
            raise ValueError(f"usage {self.name!r} needs at least one tier")


@dataclass(frozen=True)
class Phase(_CatalogEntity):
    """A plan phase priced either by a recurring fee or by usage, never both."""

    phase_type: PhaseType
    duration: Duration
    recurring: Optional[Recurring] = None
    usages: tuple[Usage, ...] = ()

    def __post_init__(self) -> None:
        if (self.recurring is None) == (not self.usages):
            raise ValueError("a phase needs exactly one of a recurring price or usages")


@dataclass(frozen=True)
class Product(_CatalogEntity):
    name: str
    display_name: str
    category: ProductCategory = ProductCategory.BASE
    available: tuple[str, ...] = ()
    included: tuple[str, ...] = ()


@dataclass(frozen=True)
class Plan(_CatalogEntity):
    name: str
    display_name: str
    price_list_name: str
    product: Product
    final_phase: Phase
    initial_phases: tuple[Phase, ...] = ()
    recurring_billing_period: Optional[BillingPeriod] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("plan name must be non-empty")

    @property
    def is_usage_based(self) -> bool:
        return bool(self.final_phase.usages)


@dataclass(frozen=True)
class PriceList(_CatalogEntity):
    name: str
    display_name: str
    plans: tuple[Plan, ...] = ()


# =============================================================================
# Plan rules
# =============================================================================


@dataclass(frozen=True)
class CaseBillingAlignment(_CatalogEntity):
    billing_alignment: BillingAlignment
    product_category: Optional[ProductCategory] = None
    billing_period: Optional[BillingPeriod] = None


@dataclass(frozen=True)
class CaseCreateAlignment(_CatalogEntity):
    plan_alignment_create: PlanAlignmentCreate


@dataclass(frozen=True)
class CaseCancelPolicy(_CatalogEntity):
    billing_action_policy: BillingActionPolicy
    product_category: Optional[ProductCategory] = None


@dataclass(frozen=True)
class CaseChangePlanPolicy(_CatalogEntity):
    billing_action_policy: BillingActionPolicy


@dataclass(frozen=True)
class CaseChangePlanAlignment(_CatalogEntity):
    alignment: PlanAlignmentChange


@dataclass(frozen=True)
class PlanRules(_CatalogEntity):
    billing_alignment_cases: tuple[CaseBillingAlignment, ...]
    create_alignment_cases: tuple[CaseCreateAlignment, ...]
    cancel_policy_cases: tuple[CaseCancelPolicy, ...]
    change_plan_policy_cases: tuple[CaseChangePlanPolicy, ...]
    change_plan_alignment_cases: tuple[CaseChangePlanAlignment, ...]


# =============================================================================
# Snapshot
# =============================================================================


@dataclass(frozen=True)
class StandaloneCatalog(_CatalogEntity):
    catalog_name: str
    effective_date: datetime
    currencies: tuple[Currency, ...]
    units: frozenset[Unit]
    products: frozenset[Product]
    plans: tuple[Plan, ...]
    default_price_list: PriceList
    plan_rules: PlanRules


@dataclass(frozen=True)
class VersionedCatalog(_CatalogEntity):
    catalog_name: str
    versions: tuple[StandaloneCatalog, ...]

    def __post_init__(self) -> None:
        if not self.versions:
            raise ValueError("a versioned catalog needs at least one version")

    @property
    def current(self) -> StandaloneCatalog:
        return self.versions[-1]

    @property
    def effective_date(self) -> datetime:
        return self.current.effective_date
