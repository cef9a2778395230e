from __future__ import annotations

import pytest

from amberflo_catalog.catalog.billing_period import (
    NO_BILLING_PERIOD,
    ONE_TIME_SUFFIX,
    billing_period_for,
    display_suffix,
    parse_interval,
)
from amberflo_catalog.contracts import BillingPeriod


@pytest.mark.parametrize(
    ("interval", "period", "suffix"),
    [
        ("day", BillingPeriod.DAILY, "-Daily"),
        ("week", BillingPeriod.WEEKLY, "-Weekly"),
        ("month", BillingPeriod.MONTHLY, "-Monthly"),
        ("year", BillingPeriod.ANNUAL, "-Yearly"),
    ],
)
def test_known_intervals_map_to_period_and_suffix(interval: str, period: BillingPeriod, suffix: str) -> None:
    mapping = parse_interval(interval)
    assert mapping.billing_period == period
    assert mapping.suffix == suffix


@pytest.mark.parametrize("interval", ["", None, "fortnight", "quarter", "monthly", "Month", " month", "YEAR"])
def test_unknown_intervals_map_to_no_billing_period(interval: str | None) -> None:
    assert parse_interval(interval) == NO_BILLING_PERIOD
    assert billing_period_for(interval) == BillingPeriod.NO_BILLING_PERIOD
    assert display_suffix(interval) == ""


def test_one_time_overrides_interval() -> None:
    assert billing_period_for("year", one_time=True) == BillingPeriod.DAILY
    assert display_suffix("year", one_time=True) == ONE_TIME_SUFFIX
    assert display_suffix("", one_time=True) == "-One-Time"
