# errors.py
"""
Pricing error taxonomy.

Every error carries a machine readable ``kind``, the id of the offending
line item (when known) and the offending lookup key, so callers can point
at the exact line that could not be priced.
"""
from typing import Any, Dict, List, Optional


class PricingError(ValueError):
    kind = "PricingError"

    def __init__(self, message: str, *, item_id: Optional[str] = None, key: Any = None):
        super().__init__(message)
        self.message = message
        self.item_id = item_id
        self.key = key

    def for_item(self, item_id: str) -> "PricingError":
        self.item_id = item_id
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "item_id": self.item_id,
            "key": None if self.key is None else str(self.key),
            "message": self.message,
        }

    def __str__(self) -> str:
        if self.item_id:
            return f"[{self.kind}] item {self.item_id}: {self.message}"
        return f"[{self.kind}] {self.message}"


class NoMatchingQuantityRange(PricingError):
    kind = "NoMatchingQuantityRange"


class UnknownDimension(PricingError):
    kind = "UnknownDimension"


class PriceNotConfigured(PricingError):
    kind = "PriceNotConfigured"


class InvalidQuantity(PricingError):
    kind = "InvalidQuantity"


class InvalidDelay(PricingError):
    kind = "InvalidDelay"


class QuoteCalculationError(PricingError):
    """Raised when at least one line of a quote could not be priced."""

    kind = "QuoteCalculationError"

    def __init__(self, errors: List[PricingError]):
        failing = ", ".join(str(e.item_id) for e in errors if e.item_id) or "n/a"
        super().__init__(f"{len(errors)} line item(s) could not be priced: {failing}")
        self.errors = list(errors)

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["errors"] = [e.to_dict() for e in self.errors]
        return out


class DistanceLookupError(RuntimeError):
    pass
