"""Vendor billing interval -> catalog billing period lookup."""

from __future__ import annotations

from typing import NamedTuple

from amberflo_catalog.contracts import BillingPeriod

ONE_TIME_SUFFIX = "-One-Time"


class IntervalMapping(NamedTuple):
    billing_period: BillingPeriod
    suffix: str


NO_BILLING_PERIOD = IntervalMapping(BillingPeriod.NO_BILLING_PERIOD, "")

INTERVAL_TABLE: dict[str, IntervalMapping] = {
    "day": IntervalMapping(BillingPeriod.DAILY, "-Daily"),
    "week": IntervalMapping(BillingPeriod.WEEKLY, "-Weekly"),
    "month": IntervalMapping(BillingPeriod.MONTHLY, "-Monthly"),
    "year": IntervalMapping(BillingPeriod.ANNUAL, "-Yearly"),
}


def parse_interval(interval: str | None) -> IntervalMapping:
    """Map a free-text interval to its billing period; unknown input maps to NO_BILLING_PERIOD.

    Matching is exact, so "Month" is not recognized.
    """
    return INTERVAL_TABLE.get(interval or "", NO_BILLING_PERIOD)


def billing_period_for(interval: str | None, one_time: bool = False) -> BillingPeriod:
    if one_time:
        return BillingPeriod.DAILY
    return parse_interval(interval).billing_period


def display_suffix(interval: str | None, one_time: bool = False) -> str:
    if one_time:
        return ONE_TIME_SUFFIX
    return parse_interval(interval).suffix
