# scheduling.py
"""
Business-day calendar for lead times.

A business day is Monday to Friday. No holiday calendar is applied: only
weekends are skipped.
"""
import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Union

import tuning_knobs as knobs
from errors import InvalidDelay
from pricing_config import BASELINE_LEAD_TIME_DAYS
from quote_models import Delay, DelayType

Days = Union[int, float, Decimal]


def _d(x: Days) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


def is_business_day(day: date) -> bool:
    return day.weekday() < 5  # 5 = Saturday, 6 = Sunday


def next_business_day(day: date) -> date:
    while not is_business_day(day):
        day += timedelta(days=1)
    return day


def add_business_days(start: date, business_days: int) -> date:
    result = start
    added = 0
    while added < business_days:
        result += timedelta(days=1)
        if is_business_day(result):
            added += 1
    return result


def indication_date(now: Union[date, datetime]) -> date:
    """Date a quote is issued on: today, or the next Monday on weekends."""
    today = now.date() if isinstance(now, datetime) else now
    return next_business_day(today)


def validate_delay(delay: Delay, minimum_working_days: int = knobs.MIN_WORKING_DAYS) -> None:
    if delay.is_express != (delay.type == DelayType.EXPRESS):
        raise InvalidDelay(
            f"delay type {delay.type.value!r} does not match is_express={delay.is_express}",
            key=delay.type.value,
        )
    if delay.is_express:
        if delay.express_days is None:
            raise InvalidDelay("express delay needs express_days", key=delay.type.value)
        days = _d(delay.express_days)
        if days <= 0 or days < _d(knobs.MIN_EXPRESS_DAYS):
            raise InvalidDelay(
                f"express_days must be >= {knobs.MIN_EXPRESS_DAYS}, got {days}",
                key=str(days),
            )
        return

    if delay.working_days < minimum_working_days:
        raise InvalidDelay(
            f"working_days must be >= {minimum_working_days}, got {delay.working_days}",
            key=delay.working_days,
        )


def delivery_date(delay: Delay, start: date) -> date:
    """Date the order ships, counted in business days from the indication date.

    Express lead times under one day (e.g. 0.5 for 24h) still land on the
    next business day.
    """
    validate_delay(delay)
    if delay.is_express:
        days = max(1, math.ceil(_d(delay.express_days)))
    else:
        days = delay.working_days
    return add_business_days(start, days)


def express_surcharge_percent(
    baseline_days: Days,
    chosen_days: Days,
    percent_per_day: Days,
) -> Decimal:
    """Surcharge in percent for shaving days off the baseline lead time.

    Linear in the days saved, zero at (or beyond) the baseline.
    """
    saved = _d(baseline_days) - _d(chosen_days)
    if saved <= 0:
        return Decimal("0")
    return _d(percent_per_day) * saved


def surcharge_percent_for_delay(delay: Delay, percent_per_day: Days) -> Decimal:
    # Express and reduced standard delays share the same formula.
    return express_surcharge_percent(BASELINE_LEAD_TIME_DAYS, delay.chosen_days, percent_per_day)


def available_delay_options() -> List[Delay]:
    """Delay menu offered to clients, filtered by the presets in tuning_knobs."""
    options = [Delay(type=DelayType.STANDARD, working_days=BASELINE_LEAD_TIME_DAYS)]

    if knobs.DELAY_ENABLED.get("reduced", False):
        for days in range(BASELINE_LEAD_TIME_DAYS - 1, knobs.MIN_WORKING_DAYS - 1, -1):
            options.append(Delay(type=DelayType.STANDARD, working_days=days))

    if knobs.DELAY_ENABLED.get("express", False):
        options.append(
            Delay(
                type=DelayType.EXPRESS,
                working_days=BASELINE_LEAD_TIME_DAYS,
                is_express=True,
                express_days=_d(knobs.DEFAULT_EXPRESS_DAYS),
            )
        )

    return options
