"""Tests for line item pricing."""

from decimal import Decimal

import pytest

from errors import InvalidDelay, InvalidQuantity, NoMatchingQuantityRange, UnknownDimension
from pricing_config import default_pricing_config
from pricing_engine import money, price_line_item
from quote_models import (
    ColorQuantities,
    Delay,
    DelayType,
    DirectToFilmOptions,
    EmbroideryOptions,
    EmbroiderySize,
    LineItem,
    ScreenPrintOptions,
    SizeQuantity,
    TextileType,
    line_item,
)
from service_pricing import ScreenPrintPricing, ServicePricingTables

SIX_DAYS = Delay(type=DelayType.STANDARD, working_days=6)


@pytest.fixture
def tiered_tables(tables):
    """Default tables with the screen print grid of the worked example (11-100 at 3.20)."""
    screen_print = ScreenPrintPricing.model_validate({
        "quantity_ranges": [
            {"min": 1, "max": 10, "label": "1-10"},
            {"min": 11, "max": 100, "label": "11-100"},
            {"min": 101, "max": None, "label": "101+"},
        ],
        "color_counts": [1, 2, 3],
        "fixed_fee_per_color": "25",
        "prices_light": {"11-100": {2: "3.20"}},
        "prices_dark": {"11-100": {2: "3.60"}},
    })
    return ServicePricingTables(
        screen_print=screen_print, embroidery=tables.embroidery, direct_to_film=tables.direct_to_film
    )


# ----------------------------
# Worked examples
# ----------------------------
def test_screen_print_fifty_units_two_colors(screen_print_item, config, tiered_tables):
    detail = price_line_item(screen_print_item, config, tiered_tables)

    assert detail.unit_price == Decimal("3.20")
    assert detail.quantity == 50
    assert detail.unit_price * detail.quantity == Decimal("160")
    assert detail.fixed_fees == Decimal("50")
    assert detail.options_surcharge == 0
    assert detail.express_surcharge == 0
    assert detail.total == Decimal("210")


def test_embroidery_below_threshold_uses_small_digitization(embroidery_item, config, tables):
    detail = price_line_item(embroidery_item, config, tables)

    assert detail.fixed_fees == tables.embroidery.fixed_fee_small_digitization
    assert detail.fixed_fees != tables.embroidery.fixed_fee_large_digitization
    assert detail.total == Decimal("200") * Decimal("2.50") + Decimal("40")


def test_embroidery_above_threshold_uses_large_digitization(tshirt, config, tables):
    options = EmbroideryOptions(stitch_count=12000, size=EmbroiderySize.LARGE)
    item = line_item("emb-2", tshirt, options, {"Red": {"M": 5}})
    detail = price_line_item(item, config, tables)

    assert detail.unit_price == Decimal("5.50")
    assert detail.fixed_fees == Decimal("60")


def test_dtf_has_no_fixed_fee(dtf_item, config, tables):
    detail = price_line_item(dtf_item, config, tables)
    assert detail.fixed_fees == 0
    assert detail.total == Decimal("70")


# ----------------------------
# Options + express
# ----------------------------
def test_options_are_a_percentage_of_unit_price(tshirt, config, tables):
    item = line_item(
        "sp-opt",
        tshirt,
        ScreenPrintOptions(TextileType.LIGHT, 2, "20x30 cm", selected_options=("gold", "discharge")),
        {"White": {"M": 50}},
    )
    detail = price_line_item(item, config, tables)

    # 1.80 x (25% + 15%)
    assert detail.options_surcharge == Decimal("0.72")
    assert detail.total == Decimal("1.80") * 50 + Decimal("50") + Decimal("0.72") * 50


def test_unknown_option_fails_the_line(tshirt, config, tables):
    item = line_item(
        "sp-bad",
        tshirt,
        ScreenPrintOptions(TextileType.LIGHT, 2, "20x30 cm", selected_options=("glitter",)),
        {"White": {"M": 50}},
    )
    with pytest.raises(UnknownDimension) as exc:
        price_line_item(item, config, tables)
    assert exc.value.item_id == "sp-bad"


def test_reduced_delay_surcharges_unit_and_options(tshirt, config, tables):
    item = line_item(
        "sp-exp",
        tshirt,
        ScreenPrintOptions(TextileType.LIGHT, 2, "20x30 cm", selected_options=("gold",)),
        {"White": {"M": 50}},
    )
    detail = price_line_item(item, config, tables, SIX_DAYS)

    assert detail.express_surcharge_percent == Decimal("40")
    # (1.80 + 0.45) x 50 x 40%
    assert detail.express_surcharge == Decimal("45")
    assert detail.total == Decimal("90") + Decimal("50") + Decimal("22.5") + Decimal("45")


def test_express_surcharge_excludes_fixed_fees(dtf_item, config, tables):
    detail = price_line_item(dtf_item, config, tables, SIX_DAYS)
    assert detail.express_surcharge == Decimal("3.50") * 20 * Decimal("0.4")
    assert detail.total == Decimal("98")


def test_express_and_reduced_delay_price_the_same(dtf_item, config, tables):
    express = Delay(type=DelayType.EXPRESS, working_days=10, is_express=True, express_days=Decimal("6"))
    assert price_line_item(dtf_item, config, tables, express) == price_line_item(
        dtf_item, config, tables, SIX_DAYS
    )


def test_standard_delay_has_no_surcharge(dtf_item, config, tables):
    detail = price_line_item(dtf_item, config, tables, Delay(type=DelayType.STANDARD, working_days=10))
    assert detail.express_surcharge == 0


def test_invalid_delay_is_tagged_with_item(dtf_item, config, tables):
    with pytest.raises(InvalidDelay) as exc:
        price_line_item(dtf_item, config, tables, Delay(type=DelayType.STANDARD, working_days=0))
    assert exc.value.item_id == "dtf-1"


# ----------------------------
# Textile discount / client-provided
# ----------------------------
def test_textile_discount_reduces_unit_price(screen_print_item, tables):
    config = default_pricing_config()  # 30% off
    detail = price_line_item(screen_print_item, config, tables)

    assert detail.base_unit_price == Decimal("1.80")
    assert detail.unit_price == Decimal("1.26")
    assert detail.indexation_surcharge == 0


def test_client_provided_is_free_for_client_but_indexed_for_erp(tshirt, tables):
    config = default_pricing_config()  # 30% discount, 10% indexation
    item = line_item(
        "sp-cp",
        tshirt,
        ScreenPrintOptions(TextileType.LIGHT, 2, "20x30 cm", selected_options=("gold",)),
        {"White": {"M": 50}},
        client_provided=True,
    )
    detail = price_line_item(item, config, tables, SIX_DAYS)

    assert detail.unit_price == 0
    assert detail.options_surcharge == 0
    assert detail.express_surcharge == 0
    assert detail.total == detail.fixed_fees == Decimal("50")
    # internal: base price x indexation, textile discount not applied
    assert detail.indexation_surcharge == Decimal("0.18")
    assert detail.erp_unit_price == Decimal("0.18")
    assert "indexation_surcharge" not in detail.to_breakdown()


# ----------------------------
# Failures
# ----------------------------
def test_unknown_print_size(tshirt, config, tables):
    item = line_item("dtf-bad", tshirt, DirectToFilmOptions(print_size="99x99 cm"), {"Black": {"M": 10}})
    with pytest.raises(UnknownDimension) as exc:
        price_line_item(item, config, tables)
    assert exc.value.to_dict() == {
        "kind": "UnknownDimension",
        "item_id": "dtf-bad",
        "key": "99x99 cm",
        "message": "unknown direct-to-film print size '99x99 cm'",
    }


def test_quantity_outside_ranges(tshirt, config, tables):
    dtf = tables.direct_to_film
    table = dtf.model_copy(update={"min_quantity": 11, "quantity_ranges": dtf.quantity_ranges[1:]})
    strict = tables.model_copy(update={"direct_to_film": table})
    item = line_item("dtf-few", tshirt, DirectToFilmOptions(print_size="10x10 cm"), {"Black": {"M": 3}})
    with pytest.raises(NoMatchingQuantityRange):
        price_line_item(item, config, strict)


def test_zero_quantity_is_invalid(tshirt, config, tables):
    item = line_item("dtf-0", tshirt, DirectToFilmOptions(print_size="10x10 cm"), {"Black": {"M": 0}})
    with pytest.raises(InvalidQuantity) as exc:
        price_line_item(item, config, tables)
    assert exc.value.item_id == "dtf-0"


def test_total_must_match_size_grid(tshirt, config, tables):
    item = LineItem(
        id="dtf-mismatch",
        product=tshirt,
        technique_options=DirectToFilmOptions(print_size="10x10 cm"),
        quantities_by_color_and_size=(ColorQuantities("Black", (SizeQuantity("M", 10), SizeQuantity("L", 5))),),
        total_quantity=20,
    )
    with pytest.raises(InvalidQuantity, match="sum of size quantities"):
        price_line_item(item, config, tables)


# ----------------------------
# Display
# ----------------------------
def test_rounding_only_in_breakdown(tshirt, tables):
    config = default_pricing_config(textile_discount_percent="33")
    item = line_item("dtf-r", tshirt, DirectToFilmOptions(print_size="15x15 cm"), {"Black": {"M": 3}})
    detail = price_line_item(item, config, tables)

    # 5.50 x 0.67 = 3.685 kept exact, rounded half up for display
    assert detail.unit_price == Decimal("3.685")
    assert detail.to_breakdown()["unit_price"] == Decimal("3.69")
    assert money(detail.total) == Decimal("11.06")


def test_pricing_is_deterministic(screen_print_item, config, tables):
    assert price_line_item(screen_print_item, config, tables, SIX_DAYS) == price_line_item(
        screen_print_item, config, tables, SIX_DAYS
    )
