"""Shared test fixtures for the pricing engine tests."""

import pytest

from pricing_config import default_pricing_config
from pricing_engine import PricingSnapshot
from quote_models import (
    DirectToFilmOptions,
    EmbroideryOptions,
    Product,
    ScreenPrintOptions,
    TextileType,
    line_item,
)
from service_pricing import default_service_pricing


@pytest.fixture
def config():
    """Default factors with the textile discount switched off."""
    return default_pricing_config(textile_discount_percent="0")


@pytest.fixture
def tables():
    return default_service_pricing()


@pytest.fixture
def snapshot(config, tables):
    return PricingSnapshot(config=config, tables=tables)


@pytest.fixture
def tshirt():
    return Product(id="p-tshirt", name="Cotton T-shirt", category="tshirt")


@pytest.fixture
def hoodie():
    return Product(id="p-hoodie", name="Heavy Hoodie")


@pytest.fixture
def screen_print_item(tshirt):
    """50 light t-shirts, 2 colors -> 11-50 tier, 1.80/unit in the default grid."""
    return line_item(
        "sp-1",
        tshirt,
        ScreenPrintOptions(textile_type=TextileType.LIGHT, color_count=2, print_size="20x30 cm"),
        {"White": {"S": 10, "M": 20, "L": 20}},
    )


@pytest.fixture
def embroidery_item(tshirt):
    """200 pieces, 8000 stitches -> 101+ x 5001-10000, 2.50/unit (small)."""
    return line_item(
        "emb-1",
        tshirt,
        EmbroideryOptions(stitch_count=8000),
        {"Navy": {"M": 100, "L": 100}},
    )


@pytest.fixture
def dtf_item(tshirt):
    """20 pieces, 10x10 cm -> 11-50 tier, 3.50/unit."""
    return line_item(
        "dtf-1",
        tshirt,
        DirectToFilmOptions(print_size="10x10 cm"),
        {"Black": {"M": 20}},
    )
