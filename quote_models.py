# quote_models.py
"""
Cart value types: what a client assembles before asking for a price.

Technique options form a closed set of three variants; the technique of a
line is derived from the type of its options, so a line can never claim one
technique while carrying another technique's options.
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

import tuning_knobs as knobs
from errors import InvalidQuantity


class Technique(str, Enum):
    SCREEN_PRINT = "screen_print"
    EMBROIDERY = "embroidery"
    DIRECT_TO_FILM = "direct_to_film"


class TextileType(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class EmbroiderySize(str, Enum):
    SMALL = "small"  # max 10x10 cm
    LARGE = "large"  # max 20x25 cm


class DelayType(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class DeliveryType(str, Enum):
    PICKUP = "pickup"
    CARRIER_MANAGED = "carrier_managed"
    CLIENT_CARRIER = "client_carrier"
    COURIER = "courier"


# ----------------------------
# Technique options
# ----------------------------
@dataclass(frozen=True)
class ScreenPrintOptions:
    textile_type: TextileType
    color_count: int
    print_size: str
    location_count: int = 1
    selected_options: Tuple[str, ...] = ()

    technique = Technique.SCREEN_PRINT

    def __post_init__(self) -> None:
        if self.color_count < 1:
            raise ValueError("color_count must be >= 1")
        if self.location_count < 1:
            raise ValueError("location_count must be >= 1")


@dataclass(frozen=True)
class EmbroideryOptions:
    stitch_count: int
    location_count: int = 1
    size: EmbroiderySize = EmbroiderySize.SMALL

    technique = Technique.EMBROIDERY

    def __post_init__(self) -> None:
        if self.stitch_count < 0:
            raise ValueError("stitch_count must be >= 0")
        if self.location_count < 1:
            raise ValueError("location_count must be >= 1")


@dataclass(frozen=True)
class DirectToFilmOptions:
    print_size: str
    location_count: int = 1

    technique = Technique.DIRECT_TO_FILM

    def __post_init__(self) -> None:
        if self.location_count < 1:
            raise ValueError("location_count must be >= 1")


TechniqueOptions = Union[ScreenPrintOptions, EmbroideryOptions, DirectToFilmOptions]


# ----------------------------
# Products + quantities
# ----------------------------
@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: Optional[str] = None


@dataclass(frozen=True)
class SizeQuantity:
    size: str
    quantity: int


@dataclass(frozen=True)
class ColorQuantities:
    color: str
    quantities: Tuple[SizeQuantity, ...] = ()

    @property
    def total(self) -> int:
        return sum(q.quantity for q in self.quantities)


@dataclass(frozen=True)
class SourceFile:
    name: str
    needs_vectorization: bool = True


@dataclass(frozen=True)
class LineItem:
    id: str
    product: Product
    technique_options: TechniqueOptions
    quantities_by_color_and_size: Tuple[ColorQuantities, ...]
    total_quantity: int
    client_provided: bool = False
    files: Tuple[SourceFile, ...] = ()

    @property
    def technique(self) -> Technique:
        return self.technique_options.technique

    @property
    def grid_quantity(self) -> int:
        return sum(cq.total for cq in self.quantities_by_color_and_size)

    @property
    def needs_vectorization(self) -> bool:
        return any(f.needs_vectorization for f in self.files)

    def validate(self) -> None:
        if any(q.quantity < 0 for cq in self.quantities_by_color_and_size for q in cq.quantities):
            raise InvalidQuantity("size quantities must be >= 0", item_id=self.id)
        if self.total_quantity < 1:
            raise InvalidQuantity(
                f"total_quantity must be >= 1, got {self.total_quantity}",
                item_id=self.id,
                key=self.total_quantity,
            )
        if self.grid_quantity != self.total_quantity:
            raise InvalidQuantity(
                f"total_quantity {self.total_quantity} != sum of size quantities {self.grid_quantity}",
                item_id=self.id,
                key=self.total_quantity,
            )


def line_item(
    id: str,
    product: Product,
    technique_options: TechniqueOptions,
    quantities: dict,
    *,
    client_provided: bool = False,
    files: Tuple[SourceFile, ...] = (),
) -> LineItem:
    """Build a LineItem from ``{color: {size: qty}}``, deriving total_quantity."""
    grid = tuple(
        ColorQuantities(color, tuple(SizeQuantity(size, qty) for size, qty in sizes.items()))
        for color, sizes in quantities.items()
    )
    return LineItem(
        id=id,
        product=product,
        technique_options=technique_options,
        quantities_by_color_and_size=grid,
        total_quantity=sum(cq.total for cq in grid),
        client_provided=client_provided,
        files=tuple(files),
    )


# ----------------------------
# Delay + delivery
# ----------------------------
@dataclass(frozen=True)
class Delay:
    type: DelayType
    working_days: int
    is_express: bool = False
    express_days: Optional[Decimal] = None

    @property
    def chosen_days(self) -> Decimal:
        """Lead time the surcharge is measured on."""
        if self.is_express and self.express_days is not None:
            return Decimal(str(self.express_days))
        return Decimal(self.working_days)


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class Delivery:
    type: DeliveryType
    address: Optional[Address] = None
    billing_address: Optional[Address] = None
    billing_address_different: bool = False
    individual_packaging: bool = False
    new_carton: bool = False

    def __post_init__(self) -> None:
        if self.type == DeliveryType.COURIER and self.address is None:
            raise ValueError("courier delivery needs a delivery address")
        if self.billing_address_different and self.billing_address is None:
            raise ValueError("billing_address_different is set but no billing_address given")


STANDARD_DELAY = Delay(type=DelayType.STANDARD, working_days=knobs.BASELINE_LEAD_TIME_DAYS)
