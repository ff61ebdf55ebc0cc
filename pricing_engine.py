# pricing_engine.py
import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from errors import PricingError, QuoteCalculationError
from pricing_config import PricingConfig, default_pricing_config
from quote_models import (
    Delay,
    Delivery,
    DirectToFilmOptions,
    EmbroideryOptions,
    LineItem,
    ScreenPrintOptions,
)
from scheduling import delivery_date, indication_date, surcharge_percent_for_delay, validate_delay
from service_pricing import ServicePricingTables, default_service_pricing
from shipping import SHIPPED_DELIVERY_TYPES, estimate_carton_count

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def money(x: Decimal) -> Decimal:
    """Round for display / aggregation. Never call mid-calculation."""
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


def _pct(x: Decimal) -> Decimal:
    return x / HUNDRED


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ValueError(msg)


@dataclass(frozen=True)
class PricingSnapshot:
    """Config + tables read once per pricing request."""

    config: PricingConfig
    tables: ServicePricingTables

    @classmethod
    def defaults(cls) -> "PricingSnapshot":
        return cls(config=default_pricing_config(), tables=default_service_pricing())


# ============================================================
# Line items
# ============================================================
@dataclass(frozen=True)
class PriceDetail:
    unit_price: Decimal  # client-visible, after textile discount
    quantity: int
    fixed_fees: Decimal
    options_surcharge: Decimal  # per unit
    express_surcharge: Decimal  # whole line
    total: Decimal
    base_unit_price: Decimal  # straight from the price table
    express_surcharge_percent: Decimal = ZERO
    client_provided: bool = False
    indexation_surcharge: Decimal = ZERO  # per unit, internal only

    @property
    def erp_unit_price(self) -> Decimal:
        # Client-provided goods show 0 to the client but the ERP gets the indexation.
        if self.client_provided:
            return self.indexation_surcharge
        return self.unit_price

    def to_breakdown(self) -> Dict[str, Any]:
        return {
            "unit_price": money(self.unit_price),
            "quantity": self.quantity,
            "fixed_fees": money(self.fixed_fees),
            "options_surcharge": money(self.options_surcharge),
            "express_surcharge_percent": self.express_surcharge_percent,
            "express_surcharge": money(self.express_surcharge),
            "total": money(self.total),
        }


def _fixed_fees(item: LineItem, tables: ServicePricingTables) -> Decimal:
    opts = item.technique_options
    if isinstance(opts, ScreenPrintOptions):
        return tables.screen_print.fixed_fees(opts.color_count)
    if isinstance(opts, EmbroideryOptions):
        return tables.embroidery.fixed_fees(opts.stitch_count)
    if isinstance(opts, DirectToFilmOptions):
        return tables.direct_to_film.fixed_fees()
    raise TypeError(f"unhandled technique options: {type(opts).__name__}")


def _options_surcharge(item: LineItem, unit_price: Decimal, tables: ServicePricingTables) -> Decimal:
    opts = item.technique_options
    if not isinstance(opts, ScreenPrintOptions):
        return ZERO

    surcharge = ZERO
    for option_id in opts.selected_options:
        surcharge += unit_price * _pct(tables.screen_print.option(option_id).surcharge_percentage)
    return surcharge


def price_line_item(
    item: LineItem,
    config: PricingConfig,
    tables: ServicePricingTables,
    delay: Optional[Delay] = None,
) -> PriceDetail:
    """Itemized price of one decorated line.

    Any lookup failure is raised as a PricingError tagged with the item id;
    a line is never priced at 0 because a lookup missed.
    """
    try:
        item.validate()
        qty = item.total_quantity

        # ---- 1) Table price ----
        base_unit_price = tables.unit_price_for(item.technique_options, qty)

        # ---- 2/3) Client-provided vs textile discount ----
        indexation = ZERO
        if item.client_provided:
            unit_price = ZERO
            indexation = base_unit_price * _pct(config.client_provided_indexation_percent)
        else:
            unit_price = base_unit_price * (1 - _pct(config.textile_discount_percent))

        # ---- 4) Fixed fees (once per line) ----
        fixed_fees = _fixed_fees(item, tables)

        # ---- 5) Named options (per unit) ----
        options_surcharge = _options_surcharge(item, unit_price, tables)

        # ---- 6) Express / reduced lead time ----
        surcharge_pct = ZERO
        if delay is not None:
            validate_delay(delay)
            surcharge_pct = surcharge_percent_for_delay(delay, config.express_surcharge_percent_per_day)
        express_surcharge = (unit_price + options_surcharge) * qty * _pct(surcharge_pct)

    except PricingError as e:
        raise e.for_item(item.id)

    # ---- 7) Line total ----
    total = (unit_price * qty) + fixed_fees + (options_surcharge * qty) + express_surcharge

    logger.debug(
        "Priced %s (%s x%s): unit=%s fixed=%s options=%s express=%s total=%s",
        item.id, item.technique.value, qty, unit_price, fixed_fees, options_surcharge, express_surcharge, total,
    )

    return PriceDetail(
        unit_price=unit_price,
        quantity=qty,
        fixed_fees=fixed_fees,
        options_surcharge=options_surcharge,
        express_surcharge=express_surcharge,
        total=total,
        base_unit_price=base_unit_price,
        express_surcharge_percent=surcharge_pct,
        client_provided=item.client_provided,
        indexation_surcharge=indexation,
    )


# ============================================================
# Quote totals
# ============================================================
@dataclass(frozen=True)
class ItemDetail:
    item: LineItem
    price_details: PriceDetail


@dataclass(frozen=True)
class QuoteTotal:
    services_total: Decimal
    shipping_cost: Decimal
    packaging_cost: Decimal
    carton_cost: Decimal
    vectorization_cost: Decimal
    express_surcharge_total: Decimal
    grand_total: Decimal
    item_details: Tuple[ItemDetail, ...]
    carton_count: int = 0
    indication_date: Optional[date] = None
    delivery_date: Optional[date] = None

    def to_breakdown(self) -> Dict[str, Any]:
        return {
            "services_total": money(self.services_total),
            "shipping_cost": money(self.shipping_cost),
            "packaging_cost": money(self.packaging_cost),
            "carton_cost": money(self.carton_cost),
            "carton_count": self.carton_count,
            "vectorization_cost": money(self.vectorization_cost),
            "express_surcharge_total": money(self.express_surcharge_total),
            "grand_total": money(self.grand_total),
            "indication_date": self.indication_date.isoformat() if self.indication_date else None,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "items": [
                {"item_id": d.item.id, **d.price_details.to_breakdown()}
                for d in self.item_details
            ],
        }


def calculate_quote_total(
    items: Sequence[LineItem],
    delivery: Delivery,
    delay: Optional[Delay],
    snapshot: PricingSnapshot,
    *,
    shipping_cost: Decimal = ZERO,
    carton_count: Optional[int] = None,
    today: Optional[date] = None,
) -> QuoteTotal:
    """Price a whole cart against one snapshot.

    ``shipping_cost`` comes from the shipping collaborator and only counts for
    delivery types that actually ship. ``carton_count`` defaults to the
    estimate from ``shipping.estimate_carton_count``. All or nothing: if any
    line fails, QuoteCalculationError lists every failing line.
    """
    shipping_cost = shipping_cost if isinstance(shipping_cost, Decimal) else Decimal(str(shipping_cost))
    _require(shipping_cost >= 0, "shipping_cost must be >= 0")
    config, tables = snapshot.config, snapshot.tables

    if delay is not None:
        validate_delay(delay)

    # ---- Lines ----
    details: List[ItemDetail] = []
    errors: List[PricingError] = []
    for item in items:
        try:
            details.append(ItemDetail(item, price_line_item(item, config, tables, delay)))
        except PricingError as e:
            errors.append(e)

    if errors:
        logger.warning("Quote rejected, %d line(s) failed: %s", len(errors), [e.to_dict() for e in errors])
        raise QuoteCalculationError(errors)

    services_total = sum((d.price_details.total for d in details), ZERO)
    express_surcharge_total = sum((d.price_details.express_surcharge for d in details), ZERO)

    # ---- Delivery add-ons ----
    shipping = shipping_cost if delivery.type in SHIPPED_DELIVERY_TYPES else ZERO

    total_quantity = sum(item.total_quantity for item in items)
    packaging_cost = (
        config.individual_packaging_unit_price * total_quantity if delivery.individual_packaging else ZERO
    )

    if carton_count is None:
        carton_count = estimate_carton_count(items)
    _require(carton_count >= 0, "carton_count must be >= 0")
    carton_cost = config.new_carton_unit_price * carton_count if delivery.new_carton else ZERO

    vectorization_count = sum(1 for item in items if item.needs_vectorization)
    vectorization_cost = config.vectorization_unit_price * vectorization_count

    # Express surcharges are already inside each line total.
    grand_total = services_total + shipping + packaging_cost + carton_cost + vectorization_cost

    issued = delivers = None
    if today is not None:
        issued = indication_date(today)
        if delay is not None:
            delivers = delivery_date(delay, issued)

    return QuoteTotal(
        services_total=services_total,
        shipping_cost=shipping,
        packaging_cost=packaging_cost,
        carton_cost=carton_cost,
        vectorization_cost=vectorization_cost,
        express_surcharge_total=express_surcharge_total,
        grand_total=grand_total,
        item_details=tuple(details),
        carton_count=carton_count,
        indication_date=issued,
        delivery_date=delivers,
    )


def quote_with_provider(
    provider,
    items: Sequence[LineItem],
    delivery: Delivery,
    delay: Optional[Delay],
    **kwargs: Any,
) -> QuoteTotal:
    """Load one snapshot from ``provider`` (anything with ``load_snapshot()``) and price the cart."""
    return calculate_quote_total(items, delivery, delay, provider.load_snapshot(), **kwargs)


def erp_lines(quote: QuoteTotal) -> List[Dict[str, Any]]:
    """Per-line values for ERP submission, including the internal indexation."""
    lines = []
    for d in quote.item_details:
        p = d.price_details
        lines.append(
            {
                "item_id": d.item.id,
                "product_id": d.item.product.id,
                "technique": d.item.technique.value,
                "quantity": p.quantity,
                "client_provided": p.client_provided,
                "unit_price": money(p.erp_unit_price),
                "indexation_surcharge": money(p.indexation_surcharge),
                "options_surcharge": money(p.options_surcharge),
                "fixed_fees": money(p.fixed_fees),
                "express_surcharge": money(p.express_surcharge),
            }
        )
    return lines


if __name__ == "__main__":
    from quote_models import STANDARD_DELAY, DeliveryType, Product, TextileType, line_item

    snapshot = PricingSnapshot.defaults()
    item = line_item(
        "demo-1",
        Product(id="1", name="Cotton T-shirt", category="tshirt"),
        ScreenPrintOptions(textile_type=TextileType.LIGHT, color_count=2, print_size="20x30 cm"),
        {"White": {"M": 30, "L": 20}},
    )
    result = calculate_quote_total(
        [item], Delivery(type=DeliveryType.PICKUP), STANDARD_DELAY, snapshot, today=date.today()
    )
    print("SERVICES:", money(result.services_total))
    print("GRAND TOTAL:", money(result.grand_total))
    print("DELIVERY:", result.delivery_date)
