# service_pricing.py
"""
Per-technique tiered price tables.

Each technique prices a unit from a two-level grid: the quantity range label
first, then a technique specific dimension (color count for screen print,
stitch range label for embroidery, print size for direct-to-film). A missing
cell is an error, never a zero price.
"""
import logging
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, NamedTuple, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

import tuning_knobs as knobs
from errors import NoMatchingQuantityRange, PriceNotConfigured, UnknownDimension
from pricing_config import Money, Percent
from quote_models import (
    DirectToFilmOptions,
    EmbroideryOptions,
    EmbroiderySize,
    ScreenPrintOptions,
    Technique,
    TechniqueOptions,
    TextileType,
)

logger = logging.getLogger(__name__)


class QuantityRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: Optional[int] = None  # None = unbounded
    label: str

    @model_validator(mode="after")
    def _check_bounds(self) -> "QuantityRange":
        if self.max is not None and self.max < self.min:
            raise ValueError(f"range {self.label!r}: max {self.max} < min {self.min}")
        return self

    def contains(self, value: int) -> bool:
        return value >= self.min and (self.max is None or value <= self.max)


class StitchRange(QuantityRange):
    pass


class PriceKey(NamedTuple):
    range_label: str
    dimension: Union[int, str]

    def __str__(self) -> str:
        return f"{self.range_label} x {self.dimension}"


class SurchargeOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    surcharge_percentage: Percent


def find_range(value: int, ranges: Sequence[QuantityRange]) -> Optional[QuantityRange]:
    for r in ranges:
        if r.contains(value):
            return r
    return None


def _check_contiguous(ranges: Sequence[QuantityRange], start: int, what: str) -> None:
    if not ranges:
        raise ValueError(f"{what}: at least one range is required")

    labels = [r.label for r in ranges]
    if len(set(labels)) != len(labels):
        raise ValueError(f"{what}: duplicate labels in {labels}")

    ordered = sorted(ranges, key=lambda r: r.min)
    if ordered[0].min != start:
        raise ValueError(f"{what}: first range starts at {ordered[0].min}, expected {start}")

    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.max is None or nxt.min != prev.max + 1:
            raise ValueError(f"{what}: {prev.label!r} and {nxt.label!r} are not contiguous")

    if ordered[-1].max is not None:
        raise ValueError(f"{what}: last range {ordered[-1].label!r} must be open-ended")


def _check_grid_labels(grid: Dict[str, dict], ranges: Sequence[QuantityRange], what: str) -> None:
    known = {r.label for r in ranges}
    unknown = sorted(set(grid) - known)
    if unknown:
        raise ValueError(f"{what}: rows for unknown quantity ranges {unknown}")


def _whole_number(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise UnknownDimension(f"{what} must be a whole number, got {value!r}", key=value)
    return value


def _variant(value, kind, what: str):
    # Plain strings are accepted by value; members of another enum are not.
    if isinstance(value, kind):
        return value
    if type(value) is str:
        try:
            return kind(value)
        except ValueError:
            pass
    raise UnknownDimension(f"unknown {what} {value!r}", key=value)


def _grid_price(grid: Dict[str, dict], key: PriceKey) -> Decimal:
    price = (grid.get(key.range_label) or {}).get(key.dimension)
    if price is None:
        logger.warning("Price lookup miss for %s", key)
        raise PriceNotConfigured(f"no price configured for {key}", key=key)
    return price


# ----------------------------
# Technique tables
# ----------------------------
class _TieredPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_quantity: int = Field(default=1, ge=0)
    quantity_ranges: List[QuantityRange]

    @model_validator(mode="after")
    def _check_quantity_ranges(self):
        _check_contiguous(self.quantity_ranges, self.min_quantity, f"{self.technique} quantity_ranges")
        return self

    def find_quantity_range(self, quantity: int) -> QuantityRange:
        qrange = None if quantity < self.min_quantity else find_range(quantity, self.quantity_ranges)
        if qrange is None:
            logger.warning("No %s quantity range for %s", self.technique, quantity)
            raise NoMatchingQuantityRange(
                f"no {self.technique} quantity range covers {quantity} (minimum {self.min_quantity})",
                key=quantity,
            )
        return qrange


class ScreenPrintPricing(_TieredPricing):
    technique: Literal["screen_print"] = "screen_print"
    color_counts: List[int]
    fixed_fee_per_color: Money
    options: List[SurchargeOption] = Field(default_factory=list)
    prices_light: Dict[str, Dict[int, Money]]
    prices_dark: Dict[str, Dict[int, Money]]

    @model_validator(mode="after")
    def _check_grids(self) -> "ScreenPrintPricing":
        _check_grid_labels(self.prices_light, self.quantity_ranges, "screen_print prices_light")
        _check_grid_labels(self.prices_dark, self.quantity_ranges, "screen_print prices_dark")
        return self

    def lookup_unit_price(
        self, quantity: int, color_count: int, textile_type: TextileType = TextileType.LIGHT
    ) -> Decimal:
        color_count = _whole_number(color_count, "screen print color count")
        textile_type = _variant(textile_type, TextileType, "textile type")
        qrange = self.find_quantity_range(quantity)
        if color_count not in self.color_counts:
            raise UnknownDimension(f"screen print does not offer {color_count} color(s)", key=color_count)
        grid = self.prices_dark if textile_type == TextileType.DARK else self.prices_light
        return _grid_price(grid, PriceKey(qrange.label, color_count))

    def fixed_fees(self, color_count: int) -> Decimal:
        return self.fixed_fee_per_color * color_count

    def option(self, option_id: str) -> SurchargeOption:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        raise UnknownDimension(f"unknown screen print option {option_id!r}", key=option_id)


class EmbroideryPricing(_TieredPricing):
    technique: Literal["embroidery"] = "embroidery"
    stitch_ranges_small: List[StitchRange]
    stitch_ranges_large: List[StitchRange]
    fixed_fee_small_digitization: Money
    fixed_fee_large_digitization: Money
    small_digitization_threshold: int = Field(ge=0)
    prices_small: Dict[str, Dict[str, Money]]
    prices_large: Dict[str, Dict[str, Money]]

    @model_validator(mode="after")
    def _check_grids(self) -> "EmbroideryPricing":
        _check_contiguous(self.stitch_ranges_small, 0, "embroidery stitch_ranges_small")
        _check_contiguous(self.stitch_ranges_large, 0, "embroidery stitch_ranges_large")
        _check_grid_labels(self.prices_small, self.quantity_ranges, "embroidery prices_small")
        _check_grid_labels(self.prices_large, self.quantity_ranges, "embroidery prices_large")
        return self

    def find_stitch_range(self, stitch_count: int, size: EmbroiderySize = EmbroiderySize.SMALL) -> StitchRange:
        ranges = self.stitch_ranges_large if size == EmbroiderySize.LARGE else self.stitch_ranges_small
        srange = find_range(stitch_count, ranges)
        if srange is None:
            raise UnknownDimension(f"no {size.value} stitch range covers {stitch_count}", key=stitch_count)
        return srange

    def lookup_unit_price(
        self, quantity: int, stitch_count: int, size: EmbroiderySize = EmbroiderySize.SMALL
    ) -> Decimal:
        stitch_count = _whole_number(stitch_count, "stitch count")
        size = _variant(size, EmbroiderySize, "embroidery size")
        qrange = self.find_quantity_range(quantity)
        srange = self.find_stitch_range(stitch_count, size)
        grid = self.prices_large if size == EmbroiderySize.LARGE else self.prices_small
        return _grid_price(grid, PriceKey(qrange.label, srange.label))

    def fixed_fees(self, stitch_count: int) -> Decimal:
        if stitch_count <= self.small_digitization_threshold:
            return self.fixed_fee_small_digitization
        return self.fixed_fee_large_digitization


class DirectToFilmPricing(_TieredPricing):
    technique: Literal["direct_to_film"] = "direct_to_film"
    print_sizes: List[str]
    prices: Dict[str, Dict[str, Money]]

    @model_validator(mode="after")
    def _check_grids(self) -> "DirectToFilmPricing":
        _check_grid_labels(self.prices, self.quantity_ranges, "direct_to_film prices")
        return self

    def lookup_unit_price(self, quantity: int, print_size: str) -> Decimal:
        qrange = self.find_quantity_range(quantity)
        if print_size not in self.print_sizes:
            raise UnknownDimension(f"unknown direct-to-film print size {print_size!r}", key=print_size)
        return _grid_price(self.prices, PriceKey(qrange.label, print_size))

    def fixed_fees(self) -> Decimal:
        return Decimal("0")


TechniquePricing = Annotated[
    Union[ScreenPrintPricing, EmbroideryPricing, DirectToFilmPricing],
    Field(discriminator="technique"),
]

pricing_list_adapter = TypeAdapter(List[TechniquePricing])


# ----------------------------
# All tables of one snapshot
# ----------------------------
class ServicePricingTables(BaseModel):
    model_config = ConfigDict(frozen=True)

    screen_print: ScreenPrintPricing
    embroidery: EmbroideryPricing
    direct_to_film: DirectToFilmPricing

    @classmethod
    def from_list(cls, tables: Sequence[Union[dict, BaseModel]]) -> "ServicePricingTables":
        by_technique: Dict[str, BaseModel] = {}
        for table in pricing_list_adapter.validate_python(list(tables)):
            if table.technique in by_technique:
                raise ValueError(f"duplicate pricing table for {table.technique}")
            by_technique[table.technique] = table

        missing = [t.value for t in Technique if t.value not in by_technique]
        if missing:
            raise ValueError(f"missing pricing table(s) for {', '.join(missing)}")

        return cls(**by_technique)

    def as_list(self) -> list:
        return [self.screen_print, self.embroidery, self.direct_to_film]

    def for_technique(self, technique: Technique):
        return getattr(self, Technique(technique).value)

    def min_quantity_for(self, technique: Technique) -> int:
        return self.for_technique(technique).min_quantity

    def lookup_unit_price(
        self,
        technique: Technique,
        quantity: int,
        dimension: Union[int, str],
        variant: Union[TextileType, EmbroiderySize, None] = None,
    ) -> Decimal:
        """Unit price for ``quantity`` pieces along the technique's secondary dimension.

        ``dimension`` is the color count, the stitch count or the print size;
        ``variant`` picks the light/dark or small/large grid where relevant.
        """
        technique = Technique(technique)
        if technique == Technique.SCREEN_PRINT:
            return self.screen_print.lookup_unit_price(
                quantity, dimension, TextileType.LIGHT if variant is None else variant
            )
        if technique == Technique.EMBROIDERY:
            return self.embroidery.lookup_unit_price(
                quantity, dimension, EmbroiderySize.SMALL if variant is None else variant
            )
        if technique == Technique.DIRECT_TO_FILM:
            return self.direct_to_film.lookup_unit_price(quantity, dimension)
        raise TypeError(f"unhandled technique: {technique}")

    def unit_price_for(self, options: TechniqueOptions, quantity: int) -> Decimal:
        if isinstance(options, ScreenPrintOptions):
            return self.screen_print.lookup_unit_price(quantity, options.color_count, options.textile_type)
        if isinstance(options, EmbroideryOptions):
            return self.embroidery.lookup_unit_price(quantity, options.stitch_count, options.size)
        if isinstance(options, DirectToFilmOptions):
            return self.direct_to_film.lookup_unit_price(quantity, options.print_size)
        raise TypeError(f"unhandled technique options: {type(options).__name__}")


# ----------------------------
# Defaults
# ----------------------------
def default_service_pricing() -> ServicePricingTables:
    return ServicePricingTables.from_list(
        [
            {
                "technique": "screen_print",
                "min_quantity": 1,
                "quantity_ranges": knobs.QUANTITY_RANGES,
                "color_counts": knobs.SCREEN_PRINT_COLOR_COUNTS,
                "fixed_fee_per_color": knobs.SCREEN_PRINT_FIXED_FEE_PER_COLOR,
                "options": knobs.SCREEN_PRINT_OPTIONS,
                "prices_light": knobs.SCREEN_PRINT_PRICES_LIGHT,
                "prices_dark": knobs.SCREEN_PRINT_PRICES_DARK,
            },
            {
                "technique": "embroidery",
                "min_quantity": 1,
                "quantity_ranges": knobs.QUANTITY_RANGES,
                "stitch_ranges_small": knobs.EMBROIDERY_STITCH_RANGES,
                "stitch_ranges_large": knobs.EMBROIDERY_STITCH_RANGES,
                "fixed_fee_small_digitization": knobs.EMBROIDERY_FIXED_FEE_SMALL_DIGITIZATION,
                "fixed_fee_large_digitization": knobs.EMBROIDERY_FIXED_FEE_LARGE_DIGITIZATION,
                "small_digitization_threshold": knobs.EMBROIDERY_SMALL_DIGITIZATION_THRESHOLD,
                "prices_small": knobs.EMBROIDERY_PRICES_SMALL,
                "prices_large": knobs.EMBROIDERY_PRICES_LARGE,
            },
            {
                "technique": "direct_to_film",
                "min_quantity": 1,
                "quantity_ranges": knobs.QUANTITY_RANGES,
                "print_sizes": knobs.DTF_PRINT_SIZES,
                "prices": knobs.DTF_PRICES,
            },
        ]
    )
