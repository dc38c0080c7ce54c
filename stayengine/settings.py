"""Engine configuration."""

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from stayengine.errors import SnapshotError

DEFAULT_TAX_RATE = Decimal("0.18")


@dataclass(frozen=True)
class EngineSettings:
    """Currency and tax settings shared by every pricing call."""

    currency: str = "USD"
    currency_quantum: Decimal = Decimal("0.01")
    tax_rate: Decimal = DEFAULT_TAX_RATE
    rounding: str = ROUND_HALF_UP

    def money(self, amount: Decimal) -> Decimal:
        """Quantize an amount to the currency's minor unit."""
        return amount.quantize(self.currency_quantum, rounding=self.rounding)

    def with_overrides(self, **overrides: Any) -> "EngineSettings":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "EngineSettings":
        """Build settings from the ``settings:`` block of an inventory file."""
        if not data:
            return cls()

        known = {"currency", "currency_quantum", "tax_rate"}
        unknown = set(data) - known
        if unknown:
            raise SnapshotError(f"Unknown settings: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        if "currency" in data:
            kwargs["currency"] = str(data["currency"]).upper()
        for key in ("currency_quantum", "tax_rate"):
            if key in data:
                kwargs[key] = parse_decimal(data[key], key)

        settings = cls(**kwargs)
        if settings.tax_rate < 0:
            raise SnapshotError("tax_rate must not be negative")
        if settings.currency_quantum <= 0:
            raise SnapshotError("currency_quantum must be positive")
        return settings


def parse_decimal(value: Any, name: str) -> Decimal:
    """Convert a YAML/CSV scalar to Decimal without going through float."""
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise SnapshotError(f"{name}: not a decimal amount: {value!r}") from e
    if not amount.is_finite():
        raise SnapshotError(f"{name}: not a finite amount: {value!r}")
    return amount
