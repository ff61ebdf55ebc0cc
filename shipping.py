# shipping.py
"""
Shipping collaborators: carton estimate and delivery cost per delivery type.

These run before the quote is priced; the quote calculator only consumes
their results.
"""
import logging
import math
from decimal import Decimal
from typing import Dict, Optional, Sequence

import tuning_knobs as knobs
from pricing_config import PricingConfig
from quote_models import Delivery, DeliveryType, LineItem, Product

logger = logging.getLogger(__name__)

# Delivery types where we pay a carrier
SHIPPED_DELIVERY_TYPES = frozenset({DeliveryType.CARRIER_MANAGED, DeliveryType.COURIER})


def carton_type(product: Product) -> str:
    category = (product.category or "").lower()
    if category == "sweat":
        return "sweat"
    if category in ("tshirt", "polo"):
        return "tshirt"

    name = product.name.lower()
    if any(word in name for word in ("sweat", "hoodie", "pull")):
        return "sweat"
    if "tote" in name or "bag" in name:
        return "totebag"

    return knobs.DEFAULT_CARTON_TYPE


def estimate_carton_count(items: Sequence[LineItem]) -> int:
    """Cartons needed, grouping pieces by product type before rounding up."""
    pieces: Dict[str, int] = {}
    for item in items:
        kind = carton_type(item.product)
        pieces[kind] = pieces.get(kind, 0) + item.total_quantity

    return sum(math.ceil(qty / knobs.CARTON_CAPACITY[kind]) for kind, qty in pieces.items())


def courier_cost(distance_km: Decimal, config: PricingConfig) -> Decimal:
    return max(config.courier_minimum_fee, Decimal(str(distance_km)) * config.courier_price_per_km)


def estimate_shipping_cost(
    items: Sequence[LineItem],
    delivery: Delivery,
    config: PricingConfig,
    distance_km: Optional[Decimal] = None,
) -> Decimal:
    """Shipping cost for the cart.

    Pickup and client-arranged carriers cost nothing. The managed carrier is
    billed per carton; a courier is billed per km with a minimum fee, so
    ``distance_km`` (see ``distance.calculate_distance_to_warehouse``) is
    required for it.
    """
    if delivery.type not in SHIPPED_DELIVERY_TYPES:
        return Decimal("0")

    if delivery.type == DeliveryType.CARRIER_MANAGED:
        return config.carrier_carton_price * estimate_carton_count(items)

    if distance_km is None:
        raise ValueError("courier delivery needs distance_km")
    cost = courier_cost(distance_km, config)
    logger.debug("Courier cost for %s km: %s", distance_km, cost)
    return cost
