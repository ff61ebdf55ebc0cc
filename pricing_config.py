# pricing_config.py
from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, Field

import tuning_knobs as knobs

BASELINE_LEAD_TIME_DAYS = knobs.BASELINE_LEAD_TIME_DAYS

Percent = Annotated[Decimal, Field(ge=0, le=100)]
Money = Annotated[Decimal, Field(ge=0)]


class PricingConfig(BaseModel):
    """Global pricing factors, as last saved by an administrator.

    Instances are frozen: a quote is always priced against one snapshot.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    textile_discount_percent: Percent
    client_provided_indexation_percent: Percent
    express_surcharge_percent_per_day: Percent
    individual_packaging_unit_price: Money
    new_carton_unit_price: Money
    vectorization_unit_price: Money

    # shipping factors
    carrier_carton_price: Money
    courier_price_per_km: Money
    courier_minimum_fee: Money


def default_pricing_config(**overrides: Any) -> PricingConfig:
    data: Dict[str, Any] = dict(knobs.PRICING_CONFIG_DEFAULTS)
    data.update(overrides)
    return PricingConfig.model_validate(data)
