"""
RegimeWise Regime Definitions — versioned by tax year.

Static rule sets: one slab table, one standard deduction and one list of honored
deduction categories per regime. Everything year-specific lives in the
TAX_YEAR_RULES registry; engine code never hard-codes a breakpoint.

FY 2025-26 (AY 2026-27):
  Old: 3L/6L/9L/12L/15L breakpoints, std deduction ₹50,000, all deductions
  New: 4L/8L/12L/16L/20L/24L breakpoints, std deduction ₹75,000, nothing else
"""
from __future__ import annotations

import logging
from typing import Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

from regimewise.config import settings
from regimewise.inputs.schemas import DeductionCategory

logger = logging.getLogger(__name__)

RegimeName = Literal["old", "new"]


# ===========================================================================
# ERRORS
# ===========================================================================

class SlabTableError(ValueError):
    """Slab table is empty or its bands are not contiguous from zero."""


class UnknownTaxYearError(ValueError):
    """No rule set is registered for the requested tax year."""

    def __init__(self, tax_year: str) -> None:
        self.tax_year = tax_year
        super().__init__(
            f"No tax rules for '{tax_year}'. Supported: {', '.join(supported_tax_years())}"
        )


# ===========================================================================
# MODELS
# ===========================================================================

class TaxSlab(BaseModel):
    """One income band: [lower, upper) taxed at rate percent. upper=None is unbounded."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    lower: float
    upper: Optional[float] = None
    rate: float

    @property
    def width(self) -> Optional[float]:
        return None if self.upper is None else self.upper - self.lower


def validate_slab_table(slabs: Sequence[TaxSlab]) -> None:
    """
    Fail fast on a malformed table.

    Rules: at least one band; first band starts at 0; each band starts where the
    previous one ended; bounds strictly increase; only the last band is
    unbounded; rates lie within 0..100.
    """
    if not slabs:
        raise SlabTableError("Slab table must contain at least one band")
    if slabs[0].lower != 0:
        raise SlabTableError(f"First band must start at 0, got {slabs[0].lower}")

    for i, slab in enumerate(slabs):
        if not 0 <= slab.rate <= 100:
            raise SlabTableError(f"Band {i}: rate {slab.rate} is outside 0..100")
        is_last = i == len(slabs) - 1
        if slab.upper is None:
            if not is_last:
                raise SlabTableError(f"Band {i}: only the last band may be unbounded")
            continue
        if is_last:
            raise SlabTableError("Last band must be unbounded (upper=None)")
        if slab.upper <= slab.lower:
            raise SlabTableError(
                f"Band {i}: upper {slab.upper} must exceed lower {slab.lower}"
            )
        if slabs[i + 1].lower != slab.upper:
            raise SlabTableError(
                f"Band {i + 1} starts at {slabs[i + 1].lower}, expected {slab.upper}"
            )


class RegimeDefinition(BaseModel):
    """Immutable rule set for one regime in one tax year."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: RegimeName
    description: str
    slabs: tuple[TaxSlab, ...]
    standard_deduction: float
    allowed_deductions: tuple[DeductionCategory, ...]

    @model_validator(mode="after")
    def _check_slabs(self) -> "RegimeDefinition":
        validate_slab_table(self.slabs)
        return self

    def honors(self, category: DeductionCategory) -> bool:
        return category in self.allowed_deductions


class TaxYearRules(BaseModel):
    """Both regimes plus the Section 80C cap for one tax year."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    tax_year: str
    old: RegimeDefinition
    new: RegimeDefinition
    investment_deduction_cap: float

    @model_validator(mode="after")
    def _check_names(self) -> "TaxYearRules":
        if self.old.name != "old" or self.new.name != "new":
            raise ValueError("TaxYearRules.old/new must hold the 'old'/'new' regimes")
        return self

    def regime(self, name: RegimeName) -> RegimeDefinition:
        return self.old if name == "old" else self.new


def _slabs(breakpoints: Sequence[float], rates: Sequence[float]) -> tuple[TaxSlab, ...]:
    """Build a contiguous table from ascending breakpoints; len(rates) == len(breakpoints) + 1."""
    bounds = [0.0, *breakpoints]
    uppers: list[Optional[float]] = [*breakpoints, None]
    return tuple(
        TaxSlab(lower=lo, upper=hi, rate=rate)
        for lo, hi, rate in zip(bounds, uppers, rates)
    )


# ===========================================================================
# FY 2025-26 (AY 2026-27)
# ===========================================================================

FY2025_26 = "FY2025-26"

OLD_SLAB_3L  = 300_000
OLD_SLAB_6L  = 600_000
OLD_SLAB_9L  = 900_000
OLD_SLAB_12L = 1_200_000
OLD_SLAB_15L = 1_500_000

NEW_SLAB_4L  = 400_000
NEW_SLAB_8L  = 800_000
NEW_SLAB_12L = 1_200_000
NEW_SLAB_16L = 1_600_000
NEW_SLAB_20L = 2_000_000
NEW_SLAB_24L = 2_400_000

OLD_STD_DEDUCTION = 50_000
NEW_STD_DEDUCTION = 75_000

CAP_80C = 150_000

OLD_REGIME_FY2025_26 = RegimeDefinition(
    name="old",
    description="Old Tax Regime with full deductions",
    slabs=_slabs(
        [OLD_SLAB_3L, OLD_SLAB_6L, OLD_SLAB_9L, OLD_SLAB_12L, OLD_SLAB_15L],
        [0, 5, 10, 15, 20, 30],
    ),
    standard_deduction=OLD_STD_DEDUCTION,
    # Standard deduction marker first, then every DeductionProfile field
    allowed_deductions=tuple(DeductionCategory),
)

NEW_REGIME_FY2025_26 = RegimeDefinition(
    name="new",
    description="New Tax Regime with limited deductions",
    slabs=_slabs(
        [NEW_SLAB_4L, NEW_SLAB_8L, NEW_SLAB_12L, NEW_SLAB_16L, NEW_SLAB_20L, NEW_SLAB_24L],
        [0, 5, 10, 15, 20, 25, 30],
    ),
    standard_deduction=NEW_STD_DEDUCTION,
    allowed_deductions=(DeductionCategory.STANDARD_DEDUCTION,),
)


# ===========================================================================
# TAX-YEAR REGISTRY
# ===========================================================================

TAX_YEAR_RULES: dict[str, TaxYearRules] = {
    FY2025_26: TaxYearRules(
        tax_year=FY2025_26,
        old=OLD_REGIME_FY2025_26,
        new=NEW_REGIME_FY2025_26,
        investment_deduction_cap=CAP_80C,
    ),
}


def supported_tax_years() -> list[str]:
    return sorted(TAX_YEAR_RULES)


def get_tax_year_rules(tax_year: Optional[str] = None) -> TaxYearRules:
    """Rules for tax_year; None selects settings.default_tax_year."""
    year = tax_year or settings.default_tax_year
    try:
        return TAX_YEAR_RULES[year]
    except KeyError:
        logger.info("Unknown tax year requested: %s", year)
        raise UnknownTaxYearError(year) from None


def get_regime(name: RegimeName, tax_year: Optional[str] = None) -> RegimeDefinition:
    return get_tax_year_rules(tax_year).regime(name)


__all__ = [
    "RegimeName",
    "SlabTableError",
    "UnknownTaxYearError",
    "TaxSlab",
    "RegimeDefinition",
    "TaxYearRules",
    "validate_slab_table",
    "FY2025_26",
    "OLD_STD_DEDUCTION",
    "NEW_STD_DEDUCTION",
    "CAP_80C",
    "OLD_REGIME_FY2025_26",
    "NEW_REGIME_FY2025_26",
    "TAX_YEAR_RULES",
    "supported_tax_years",
    "get_tax_year_rules",
    "get_regime",
]
