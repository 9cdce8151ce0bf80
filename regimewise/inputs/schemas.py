"""
schemas.py — input data contracts (Pydantic v2).

Defines:
  - CityType, DeductionCategory enums
  - IncomeProfile     (annual income per salary component)
  - DeductionProfile  (annual claimed deductions, three informal groups)
  - ErrorDetail, ErrorBody, ErrorResponse  (cross-cutting error envelope)

Both profiles are lenient about amounts: missing, negative, non-finite or
non-numeric values coerce to 0, and anything above MAX_AMOUNT is clamped, so
the tax engine stays total. Unknown keys are
still rejected (extra='forbid') to catch typos in field names.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class CityType(str, Enum):
    metro = "metro"
    non_metro = "non_metro"


class DeductionCategory(str, Enum):
    """
    Every deduction a regime may honor.

    Values are DeductionProfile field names, except STANDARD_DEDUCTION which is
    a marker: it carries no user amount and resolves to the regime's own
    fixed standard deduction.
    """
    STANDARD_DEDUCTION = "standard_deduction"

    # (a) investment-linked — Section 80C, combined cap
    ELSS = "elss"
    PPF = "ppf"
    EPF = "epf"
    LIFE_INSURANCE = "life_insurance"
    NPS = "nps"
    HOME_LOAN_PRINCIPAL = "home_loan_principal"
    SUKANYA_SAMRIDDHI = "sukanya_samriddhi"
    NSC = "nsc"
    TAX_SAVING_FD = "tax_saving_fd"

    # (b) health-insurance-linked — Section 80D, individual caps
    HEALTH_INSURANCE_SELF = "health_insurance_self"
    HEALTH_INSURANCE_PARENTS = "health_insurance_parents"
    PREVENTIVE_HEALTH_CHECKUP = "preventive_health_checkup"

    # (c) other exemptions
    HRA_EXEMPTION = "hra_exemption"
    LTA = "lta"
    HOME_LOAN_INTEREST = "home_loan_interest"
    DONATIONS = "donations"
    INTEREST_ON_SAVINGS = "interest_on_savings"


INVESTMENT_CATEGORIES: tuple[DeductionCategory, ...] = (
    DeductionCategory.ELSS,
    DeductionCategory.PPF,
    DeductionCategory.EPF,
    DeductionCategory.LIFE_INSURANCE,
    DeductionCategory.NPS,
    DeductionCategory.HOME_LOAN_PRINCIPAL,
    DeductionCategory.SUKANYA_SAMRIDDHI,
    DeductionCategory.NSC,
    DeductionCategory.TAX_SAVING_FD,
)

# Ceiling for any single amount (₹100 lakh crore). Keeps every sum and slab
# product the engine forms finite.
MAX_AMOUNT = 1e15


def coerce_amount(value: Any, ceiling: float = MAX_AMOUNT) -> float:
    """
    Return value as a non-negative finite float, or 0.0 if it is not one.
    Amounts above ceiling are clamped to it.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        # OverflowError: an int too large for a float, e.g. 10**400
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return min(amount, ceiling)


class _AmountRecord(BaseModel):
    """Flat record of annual INR amounts, every field coerced via coerce_amount."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> float:
        return coerce_amount(value)


# ---------------------------------------------------------------------------
# IncomeProfile
# ---------------------------------------------------------------------------

class IncomeProfile(_AmountRecord):
    """
    Annual income per salary component, in INR.

    Gross income is the plain sum of every field; HRA is included here and the
    exemption, if any, is claimed on the deduction side.
    """

    basic_salary: float = 0
    hra: float = 0                      # House-rent allowance received
    special_allowance: float = 0
    transport_allowance: float = 0
    medical_allowance: float = 0
    performance_bonus: float = 0
    joining_bonus: float = 0
    rsus: float = 0                     # Equity compensation vested in the year
    other_allowances: float = 0


# ---------------------------------------------------------------------------
# DeductionProfile
# ---------------------------------------------------------------------------

class DeductionProfile(_AmountRecord):
    """
    Annual deduction amounts claimed by the taxpayer, in INR.

    Raw claims, not capped values. Which of them reduce taxable income is
    decided per regime by RegimeDefinition.allowed_deductions.
    """

    # --- (a) Section 80C investment-linked ---
    elss: float = 0
    ppf: float = 0
    epf: float = 0
    life_insurance: float = 0
    nps: float = 0
    home_loan_principal: float = 0
    sukanya_samriddhi: float = 0
    nsc: float = 0
    tax_saving_fd: float = 0

    # --- (b) Section 80D health-insurance-linked ---
    health_insurance_self: float = 0
    health_insurance_parents: float = 0
    preventive_health_checkup: float = 0

    # --- (c) Other exemptions ---
    hra_exemption: float = 0
    lta: float = 0
    home_loan_interest: float = 0       # Section 24(b)
    donations: float = 0                # Section 80G
    interest_on_savings: float = 0      # Section 80TTA

    def amount(self, category: DeductionCategory) -> float:
        """Claimed amount for a category. The standard-deduction marker has none."""
        if category is DeductionCategory.STANDARD_DEDUCTION:
            return 0.0
        return getattr(self, category.value)

    def investment_total(self) -> float:
        """Unclamped sum of the Section 80C investment-linked group."""
        return sum(self.amount(c) for c in INVESTMENT_CATEGORIES)


# ---------------------------------------------------------------------------
# Error response models — used by main.py exception handlers (cross-cutting)
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    """Single field-level validation or business-rule error."""
    model_config = ConfigDict(extra="forbid")

    field: Optional[str] = None   # Dot-notation field path, e.g. "income.basic_salary"
    issue: str                     # Human-readable description of the problem


class ErrorBody(BaseModel):
    """Error envelope body."""
    model_config = ConfigDict(extra="forbid")

    code: str                                      # VALIDATION_ERROR, NOT_FOUND, etc.
    message: str                                   # High-level error description
    details: List[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Standard error response format for all RegimeWise endpoints.

    Structure: {"error": {"code": "...", "message": "...", "details": [...]}}
    """
    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


__all__ = [
    "CityType",
    "DeductionCategory",
    "INVESTMENT_CATEGORIES",
    "MAX_AMOUNT",
    "coerce_amount",
    "IncomeProfile",
    "DeductionProfile",
    "ErrorDetail",
    "ErrorBody",
    "ErrorResponse",
]
