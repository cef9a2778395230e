"""Translate Amberflo plans and product items into catalog plans.

Each vendor plan can yield plans along two independent paths:

1) fee-derived: one plan per entry of ``feeMap`` (recurring or one-time fee)
2) usage-derived: one plan per entry of ``productItemPriceIdsMap`` whose
   product item is known; its tier schedule is resolved per price-id

Products and units are collected in a per-pass accumulator and frozen into the
result, so two translations never share mutable state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from amberflo_catalog.catalog.billing_period import billing_period_for, display_suffix
from amberflo_catalog.catalog.schema import (
    CaseBillingAlignment,
    CaseCancelPolicy,
    CaseChangePlanAlignment,
    CaseChangePlanPolicy,
    CaseCreateAlignment,
    Duration,
    InternationalPrice,
    Phase,
    Plan,
    PlanRules,
    PriceList,
    Product,
    Recurring,
    Tier,
    TieredBlock,
    Unit,
    Usage,
)
from amberflo_catalog.config import DEFAULT_PRICE_LIST_NAME, UNBOUNDED_TIER_SIZE
from amberflo_catalog.contracts import (
    BillingActionPolicy,
    BillingAlignment,
    BillingPeriod,
    Currency,
    PhaseType,
    PlanAlignmentChange,
    PlanAlignmentCreate,
    ProductCategory,
    TimeUnit,
    VendorFee,
    VendorPlan,
    VendorProductItem,
    VendorUsagePrice,
    VendorUsageTier,
)
from amberflo_catalog.errors import MappingError

logger = logging.getLogger(__name__)

PriceResolver = Callable[[str], VendorUsagePrice]

CURRENCIES: tuple[Currency, ...] = (Currency.USD,)

DEFAULT_PLAN_RULES = PlanRules(
    billing_alignment_cases=(
        CaseBillingAlignment(
            billing_alignment=BillingAlignment.BUNDLE,
            product_category=ProductCategory.ADD_ON,
        ),
        CaseBillingAlignment(
            billing_alignment=BillingAlignment.ACCOUNT,
            billing_period=BillingPeriod.MONTHLY,
        ),
        CaseBillingAlignment(
            billing_alignment=BillingAlignment.SUBSCRIPTION,
            billing_period=BillingPeriod.ANNUAL,
        ),
        CaseBillingAlignment(billing_alignment=BillingAlignment.ACCOUNT),
    ),
    create_alignment_cases=(
        CaseCreateAlignment(plan_alignment_create=PlanAlignmentCreate.START_OF_BUNDLE),
    ),
    cancel_policy_cases=(
        CaseCancelPolicy(
            billing_action_policy=BillingActionPolicy.END_OF_TERM,
            product_category=ProductCategory.BASE,
        ),
        CaseCancelPolicy(
            billing_action_policy=BillingActionPolicy.IMMEDIATE,
            product_category=ProductCategory.ADD_ON,
        ),
        CaseCancelPolicy(billing_action_policy=BillingActionPolicy.END_OF_TERM),
    ),
    change_plan_policy_cases=(
        CaseChangePlanPolicy(billing_action_policy=BillingActionPolicy.END_OF_TERM),
    ),
    change_plan_alignment_cases=(
        CaseChangePlanAlignment(alignment=PlanAlignmentChange.START_OF_SUBSCRIPTION),
    ),
)


@dataclass
class CatalogAccumulator:
    """Mutable collections for a single translation pass."""

    products: set[Product] = field(default_factory=set)
    units: set[Unit] = field(default_factory=set)
    plans: list[Plan] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TranslationResult:
    products: frozenset[Product]
    units: frozenset[Unit]
    plans: tuple[Plan, ...]
    price_list: PriceList
    currencies: tuple[Currency, ...]
    plan_rules: PlanRules
    effective_date: datetime
    skipped: tuple[str, ...] = ()


def parse_one_time_flag(raw: str) -> bool:
    """Parse the vendor's one-time indicator; only ``true`` (any case) is true."""
    return raw.strip().lower() == "true"


def compute_block_sizes(tiers: Sequence[VendorUsageTier]) -> list[float]:
    """Return the block count covered by each tier.

    Tier i spans ``tiers[i+1].start_after_unit - tiers[i].start_after_unit``
    units, expressed in batches of ``tiers[i].batch_size``. The last tier is
    open-ended and gets UNBOUNDED_TIER_SIZE. A negative batch size on any
    tier, or a zero one before the last tier, raises MappingError.
    """
    sizes: list[float] = []
    for idx, tier in enumerate(tiers):
        if tier.batch_size < 0:
            raise MappingError(f"tier {idx} has a negative batch size")
        if idx + 1 >= len(tiers):
            sizes.append(UNBOUNDED_TIER_SIZE)
            continue
        if tier.batch_size == 0:
            raise MappingError(f"tier {idx} has a zero batch size")
        span = tiers[idx + 1].start_after_unit - tier.start_after_unit
        sizes.append(span / tier.batch_size)
    return sizes


def product_for_fee(fee: VendorFee) -> Product:
    return Product(name=fee.id, display_name=fee.name, category=ProductCategory.BASE)


def product_for_item(item: VendorProductItem) -> Product:
    return Product(name=item.id, display_name=item.product_item_name, category=ProductCategory.BASE)


def unit_for_item(item: VendorProductItem) -> Unit:
    return Unit(name=item.meter_api_name, display_name=item.product_item_name)


def build_fee_plan(vendor_plan: VendorPlan, fee: VendorFee) -> Plan:
    """Build the single-phase plan charging one flat fee."""
    one_time = parse_one_time_flag(fee.is_one_time_fee)
    billing_period = billing_period_for(vendor_plan.interval, one_time)
    if one_time:
        phase_type = PhaseType.FIXEDTERM
        duration = Duration(unit=TimeUnit.DAYS, number=1)
    else:
        phase_type = PhaseType.EVERGREEN
        duration = Duration.unlimited()

    return Plan(
        name=f"{fee.id}_{fee.name}",
        display_name=fee.name + display_suffix(vendor_plan.interval, one_time),
        price_list_name=DEFAULT_PRICE_LIST_NAME,
        product=product_for_fee(fee),
        final_phase=Phase(
            phase_type=phase_type,
            duration=duration,
            recurring=Recurring(
                billing_period=billing_period,
                recurring_price=InternationalPrice.usd(fee.cost),
            ),
        ),
        recurring_billing_period=billing_period,
    )


def build_tiers(usage_price: VendorUsagePrice, unit: Unit) -> tuple[Tier, ...]:
    sizes = compute_block_sizes(usage_price.tiers)
    return tuple(
        Tier(
            tiered_blocks=(
                TieredBlock(
                    unit=unit,
                    size=size,
                    price=InternationalPrice.usd(tier.price_per_batch),
                    max=tier.batch_size,
                ),
            )
        )
        for tier, size in zip(usage_price.tiers, sizes)
    )


def build_usage_plan(
    vendor_plan: VendorPlan,
    price_id: str,
    item: VendorProductItem,
    usage_price: VendorUsagePrice,
) -> Plan:
    """Build the evergreen plan billing one product item's metered usage in arrear."""
    if not usage_price.tiers:
        raise MappingError(f"price {price_id} has no tiers")
    display_name = item.product_item_name + display_suffix(vendor_plan.interval)
    usage = Usage(
        name=f"{display_name}-Usage",
        billing_period=billing_period_for(vendor_plan.interval),
        tiers=build_tiers(usage_price, unit_for_item(item)),
    )
    return Plan(
        name=price_id,
        display_name=display_name,
        price_list_name=DEFAULT_PRICE_LIST_NAME,
        product=product_for_item(item),
        final_phase=Phase(
            phase_type=PhaseType.EVERGREEN,
            duration=Duration.unlimited(),
            usages=(usage,),
        ),
    )


def effective_date_of(plans: Sequence[VendorPlan], now: Optional[datetime] = None) -> datetime:
    """Effective date of the snapshot: the first plan's last update, else now.

    This reads the first plan, not the maximum across plans, and so depends
    on the vendor returning the most recently updated plan first.
    """
    fallback = now or datetime.now(timezone.utc)
    if not plans or plans[0].last_update_time_in_millis is None:
        return fallback
    return datetime.fromtimestamp(plans[0].last_update_time_in_millis / 1000, tz=timezone.utc)


class _MemoizedResolver:
    def __init__(self, resolve: PriceResolver) -> None:
        self._resolve = resolve
        self._cache: dict[str, VendorUsagePrice] = {}

    def __call__(self, price_id: str) -> VendorUsagePrice:
        if price_id not in self._cache:
            self._cache[price_id] = self._resolve(price_id)
        return self._cache[price_id]


def _skip(acc: CatalogAccumulator, vendor_plan: VendorPlan, key: str, exc: MappingError) -> None:
    message = f"plan {vendor_plan.id} entry {key}: {exc}"
    logger.warning("Skipping unmappable entry: %s", message)
    acc.skipped.append(message)


def _translate_fees(acc: CatalogAccumulator, vendor_plan: VendorPlan) -> None:
    for fee_id, fee in vendor_plan.fee_map.items():
        try:
            plan = build_fee_plan(vendor_plan, fee)
        except (MappingError, ValueError) as exc:
            _skip(acc, vendor_plan, fee_id, MappingError(str(exc)))
            continue
        acc.plans.append(plan)
        acc.products.add(plan.product)


def _translate_price_ids(
    acc: CatalogAccumulator,
    vendor_plan: VendorPlan,
    items_by_id: dict[str, VendorProductItem],
    resolve_price: PriceResolver,
) -> None:
    for item_id, price_id in vendor_plan.product_item_price_ids_map.items():
        item = items_by_id.get(item_id)
        if item is None:
            _skip(acc, vendor_plan, item_id, MappingError(f"unknown product item for price {price_id}"))
            continue
        try:
            plan = build_usage_plan(vendor_plan, price_id, item, resolve_price(price_id))
        except (MappingError, ValueError) as exc:
            _skip(acc, vendor_plan, item_id, MappingError(str(exc)))
            continue
        acc.plans.append(plan)
        acc.products.add(plan.product)


def translate_catalog(
    plans: Sequence[VendorPlan],
    items: Sequence[VendorProductItem],
    resolve_price: PriceResolver,
    now: Optional[datetime] = None,
) -> TranslationResult:
    """Translate ready vendor plans and product items into a complete catalog result.

    ``resolve_price`` is called at most once per distinct price-id. Transport
    and decode failures raised by it abort the translation; entries that cannot
    be mapped are skipped and reported in ``TranslationResult.skipped``.
    """
    acc = CatalogAccumulator()
    items_by_id: dict[str, VendorProductItem] = {}
    for item in items:
        items_by_id.setdefault(item.id, item)
        acc.units.add(unit_for_item(item))

    resolver = _MemoizedResolver(resolve_price)
    for vendor_plan in plans:
        if vendor_plan.fee_map:
            _translate_fees(acc, vendor_plan)
        if vendor_plan.product_item_price_ids_map:
            _translate_price_ids(acc, vendor_plan, items_by_id, resolver)

    translated = tuple(acc.plans)
    return TranslationResult(
        products=frozenset(acc.products),
        units=frozenset(acc.units),
        plans=translated,
        price_list=PriceList(
            name=DEFAULT_PRICE_LIST_NAME,
            display_name=DEFAULT_PRICE_LIST_NAME,
            plans=translated,
        ),
        currencies=CURRENCIES,
        plan_rules=DEFAULT_PLAN_RULES,
        effective_date=effective_date_of(plans, now),
        skipped=tuple(acc.skipped),
    )
