"""Tests for carton estimates and delivery cost."""

from decimal import Decimal

import pytest

from quote_models import Address, Delivery, DeliveryType, DirectToFilmOptions, Product, line_item
from shipping import carton_type, courier_cost, estimate_carton_count, estimate_shipping_cost

BRUSSELS = Address("1 Grand Place", "Bruxelles", "1000", "BE")


def _item(id, product, qty):
    return line_item(id, product, DirectToFilmOptions(print_size="10x10 cm"), {"Black": {"M": qty}})


@pytest.mark.parametrize(
    "product, expected",
    [
        (Product("1", "Anything", category="sweat"), "sweat"),
        (Product("2", "Polo Premium", category="polo"), "tshirt"),
        (Product("3", "Heavy Hoodie"), "sweat"),
        (Product("4", "Organic Tote Bag"), "totebag"),
        (Product("5", "Cap"), "tshirt"),
    ],
)
def test_carton_type(product, expected):
    assert carton_type(product) == expected


def test_cartons_grouped_by_type(tshirt, hoodie):
    items = [_item("a", tshirt, 50), _item("b", tshirt, 50), _item("c", hoodie, 31)]
    # 100 t-shirts -> 2, 31 hoodies -> 2
    assert estimate_carton_count(items) == 4


def test_no_items_no_cartons():
    assert estimate_carton_count([]) == 0


def test_pickup_is_free(tshirt, config):
    assert estimate_shipping_cost([_item("a", tshirt, 100)], Delivery(type=DeliveryType.PICKUP), config) == 0


def test_client_carrier_is_free(tshirt, config):
    delivery = Delivery(type=DeliveryType.CLIENT_CARRIER)
    assert estimate_shipping_cost([_item("a", tshirt, 100)], delivery, config) == 0


def test_managed_carrier_per_carton(tshirt, config):
    delivery = Delivery(type=DeliveryType.CARRIER_MANAGED)
    assert estimate_shipping_cost([_item("a", tshirt, 100)], delivery, config) == Decimal("27.30")


def test_courier_minimum_fee(config):
    assert courier_cost(Decimal("10"), config) == Decimal("25.00")


def test_courier_per_km(tshirt, config):
    delivery = Delivery(type=DeliveryType.COURIER, address=BRUSSELS)
    cost = estimate_shipping_cost([_item("a", tshirt, 10)], delivery, config, distance_km=Decimal("50"))
    assert cost == Decimal("60.00")


def test_courier_needs_distance(tshirt, config):
    delivery = Delivery(type=DeliveryType.COURIER, address=BRUSSELS)
    with pytest.raises(ValueError, match="distance_km"):
        estimate_shipping_cost([_item("a", tshirt, 10)], delivery, config)
