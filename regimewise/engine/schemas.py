"""
schemas.py — engine output contracts and HTTP bodies (Pydantic v2).

Defines:
  - SlabTax                  (tax attributed to one band)
  - TaxResult                (full computation for one regime)
  - RegimeComparison         (old vs new + recommendation — main engine output)
  - InvestmentCapUtilization (Section 80C usage report)
  - HraExemption, SalaryBreakdown  (helper calculators)
  - CalculateRequest/Response, HraRequest, SalaryRequest, RegimeView  (API bodies)
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from regimewise.inputs.schemas import (
    CityType,
    DeductionCategory,
    DeductionProfile,
    IncomeProfile,
    MAX_AMOUNT,
)


# ---------------------------------------------------------------------------
# SlabTax — one band's share of the tax
# ---------------------------------------------------------------------------

class SlabTax(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lower: float
    upper: Optional[float] = None      # None = unbounded top band
    rate: float                        # Percent
    taxed_amount: float                # Portion of taxable income inside this band
    tax: float                         # Unrounded taxed_amount * rate / 100


# ---------------------------------------------------------------------------
# TaxResult — full tax calculation for one regime
# ---------------------------------------------------------------------------

class TaxResult(BaseModel):
    """
    Complete computation for a single regime.

    Computation sequence:
      1. gross_income = sum of IncomeProfile fields
      2. total_deductions = sum of honored deductions (+ standard deduction)
      3. taxable_income = max(0, gross_income - total_deductions)
      4. tax_amount = progressive slab tax, rounded to the rupee
      5. yearly_in_hand = gross_income - tax_amount; monthly_in_hand = yearly / 12
    """
    model_config = ConfigDict(extra="forbid")

    regime: Literal["old", "new"]
    tax_year: Optional[str] = None
    gross_income: float
    standard_deduction: float
    total_deductions: float
    taxable_income: float
    tax_amount: int
    effective_tax_rate: float          # Percent of gross, 2 dp
    monthly_in_hand: int
    yearly_in_hand: int
    # Amount actually applied per honored category (standard deduction included)
    deduction_breakdown: Dict[DeductionCategory, float] = Field(default_factory=dict)
    slab_breakdown: List[SlabTax] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# RegimeComparison — public output of compare_regimes()
# ---------------------------------------------------------------------------

class RegimeComparison(BaseModel):
    """
    Both regimes side by side.

    recommended_regime is the one with strictly lower tax; equal tax selects
    "old". All differences are absolute values.
    """
    model_config = ConfigDict(extra="forbid")

    old_regime: TaxResult
    new_regime: TaxResult
    recommended_regime: Literal["old", "new"]
    recommendation: str
    tax_savings: int
    monthly_difference: int
    yearly_difference: int


# ---------------------------------------------------------------------------
# InvestmentCapUtilization — Section 80C usage
# ---------------------------------------------------------------------------

class InvestmentCapUtilization(BaseModel):
    model_config = ConfigDict(extra="forbid")

    used: float                        # Clamped at limit
    limit: float
    remaining: float
    utilization_percentage: int


# ---------------------------------------------------------------------------
# Helper calculators
# ---------------------------------------------------------------------------

class HraExemption(BaseModel):
    """HRA exemption under Section 10(13A): minimum of the three components."""
    model_config = ConfigDict(extra="forbid")

    hra_received: float                # Component 1
    rent_minus_tenth_basic: float      # Component 2, floored at 0
    city_limit: float                  # Component 3: 50% / 40% of basic
    exemption: float
    taxable_hra: float
    required_rent: int                 # Annual rent needed to exempt all HRA


class SalaryBreakdown(BaseModel):
    model_config = ConfigDict(extra="forbid")

    regime: Literal["old", "new"]
    gross_salary: float
    total_allowances: float
    payroll_deductions: float          # EPF + professional tax
    standard_deduction: float
    hra_exemption: float
    taxable_income: float
    tax_amount: int
    net_salary: float
    monthly_in_hand: int
    yearly_in_hand: int
    effective_tax_rate: float


# ---------------------------------------------------------------------------
# HTTP bodies
# ---------------------------------------------------------------------------

class CalculateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tax_year: Optional[str] = None
    income: IncomeProfile = Field(default_factory=IncomeProfile)
    deductions: DeductionProfile = Field(default_factory=DeductionProfile)


class CalculateResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tax_year: str
    investment_cap_enforced: bool
    comparison: RegimeComparison
    investment_cap: InvestmentCapUtilization
    warnings: List[str] = Field(default_factory=list)


class HraRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    basic_salary: float = Field(..., ge=0, le=MAX_AMOUNT)
    hra_received: float = Field(default=0, ge=0, le=MAX_AMOUNT)
    rent_paid: float = Field(default=0, ge=0, le=MAX_AMOUNT, description="Annual rent paid.")
    city_type: CityType = CityType.metro


class SalaryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tax_year: Optional[str] = None
    regime: Literal["old", "new"] = "new"
    income: IncomeProfile = Field(default_factory=IncomeProfile)
    epf_contribution: float = Field(default=0, ge=0, le=MAX_AMOUNT)
    professional_tax: float = Field(default=0, ge=0, le=MAX_AMOUNT)
    rent_paid: float = Field(default=0, ge=0, le=MAX_AMOUNT, description="Annual rent paid.")
    city_type: CityType = CityType.metro


class RegimeView(BaseModel):
    """Display form of a RegimeDefinition."""
    model_config = ConfigDict(extra="forbid")

    name: Literal["old", "new"]
    description: str
    standard_deduction: float
    allowed_deductions: List[DeductionCategory]
    slabs: List[str]                   # e.g. "₹3,00,000 - ₹6,00,000 @ 5%"


__all__ = [
    "SlabTax",
    "TaxResult",
    "RegimeComparison",
    "InvestmentCapUtilization",
    "HraExemption",
    "SalaryBreakdown",
    "CalculateRequest",
    "CalculateResponse",
    "HraRequest",
    "SalaryRequest",
    "RegimeView",
]
