"""
RegimeWise Tax Engine
Pure Python, deterministic, no I/O. Same input → same output.

Public API:
  compute_gross_income               sum of the income profile
  compute_total_deductions           honored deductions for one regime
  compute_tax_amount                 progressive slab tax, whole rupees
  compute_regime_result              one regime end to end
  compare_regimes                    both regimes + recommendation
  compute_investment_cap_utilization Section 80C usage report (informational)

Section 80C cap: compute_total_deductions adds investment-linked claims in full
unless an investment_cap is passed. compare_regimes passes the tax year's cap
only when cap_investments=True. The utilization report always clamps.
"""
from __future__ import annotations

import sys
from typing import Iterator, Optional, Sequence

from regimewise.engine.regimes import (
    RegimeDefinition,
    TaxSlab,
    TaxYearRules,
    get_tax_year_rules,
    validate_slab_table,
)
from regimewise.engine.schemas import (
    InvestmentCapUtilization,
    RegimeComparison,
    SlabTax,
    TaxResult,
)
from regimewise.formatters import format_inr, round_half_up
from regimewise.inputs.schemas import (
    INVESTMENT_CATEGORIES,
    DeductionCategory,
    DeductionProfile,
    IncomeProfile,
    coerce_amount,
)

# Largest taxable income whose band products (amount × rate ≤ 100) stay finite
_MAX_TAXABLE = sys.float_info.max / 100


# ===========================================================================
# INTERNAL HELPERS
# ===========================================================================

def _allocate(taxable_income: float, slabs: Sequence[TaxSlab]) -> Iterator[SlabTax]:
    """
    Walk the bands from the bottom, yielding the portion of income in each.
    Stops once the whole income is allocated; the top band takes the remainder.
    """
    remaining = taxable_income
    for slab in slabs:
        if remaining <= 0:
            break
        width = slab.width
        taxed = remaining if width is None else min(remaining, width)
        remaining -= taxed
        yield SlabTax(
            lower=slab.lower,
            upper=slab.upper,
            rate=slab.rate,
            taxed_amount=taxed,
            tax=taxed * slab.rate / 100,
        )


# ===========================================================================
# AGGREGATES
# ===========================================================================

def compute_gross_income(income: IncomeProfile) -> float:
    """
    Sum of every income field; invalid amounts count as 0. Each field is
    clamped at MAX_AMOUNT, so the sum is always finite.
    """
    return sum(coerce_amount(v) for v in income.model_dump().values())


def compute_deduction_breakdown(
    deductions: DeductionProfile,
    regime: RegimeDefinition,
    *,
    investment_cap: Optional[float] = None,
) -> dict[DeductionCategory, float]:
    """
    Amount applied per category the regime honors.

    The standard-deduction marker resolves to regime.standard_deduction.
    Categories outside regime.allowed_deductions never appear.
    With investment_cap set, the 80C group shares that headroom in
    declaration order, so the group total is min(claimed, cap).
    """
    breakdown: dict[DeductionCategory, float] = {}
    headroom = investment_cap
    for category in regime.allowed_deductions:
        if category is DeductionCategory.STANDARD_DEDUCTION:
            breakdown[category] = float(regime.standard_deduction)
            continue
        amount = coerce_amount(deductions.amount(category))
        if headroom is not None and category in INVESTMENT_CATEGORIES:
            amount = min(amount, headroom)
            headroom -= amount
        breakdown[category] = amount
    return breakdown


def compute_total_deductions(
    deductions: DeductionProfile,
    regime: RegimeDefinition,
    *,
    investment_cap: Optional[float] = None,
) -> float:
    """Total deductions the regime honors. No caps unless investment_cap is given."""
    return sum(
        compute_deduction_breakdown(deductions, regime, investment_cap=investment_cap).values()
    )


# ===========================================================================
# SLAB TAX
# ===========================================================================

def compute_slab_breakdown(taxable_income: float, slabs: Sequence[TaxSlab]) -> list[SlabTax]:
    """Per-band share of taxable_income. Raises SlabTableError on a malformed table."""
    validate_slab_table(slabs)
    return list(_allocate(coerce_amount(taxable_income, _MAX_TAXABLE), slabs))


def compute_tax_amount(taxable_income: float, slabs: Sequence[TaxSlab]) -> int:
    """
    Progressive (marginal-rate) tax on taxable_income, rounded to the rupee.

    taxable_income <= 0 → 0. Zero-rate bands contribute nothing. The result is
    continuous and non-decreasing in taxable_income.
    """
    return round_half_up(sum(b.tax for b in compute_slab_breakdown(taxable_income, slabs)))


# ===========================================================================
# ONE REGIME
# ===========================================================================

def compute_regime_result(
    income: IncomeProfile,
    deductions: DeductionProfile,
    regime: RegimeDefinition,
    *,
    investment_cap: Optional[float] = None,
    tax_year: Optional[str] = None,
) -> TaxResult:
    gross_income = compute_gross_income(income)
    breakdown = compute_deduction_breakdown(deductions, regime, investment_cap=investment_cap)
    total_deductions = sum(breakdown.values())

    taxable_income = max(0.0, gross_income - total_deductions)
    slab_breakdown = compute_slab_breakdown(taxable_income, regime.slabs)
    tax_amount = round_half_up(sum(b.tax for b in slab_breakdown))

    effective_rate = tax_amount / gross_income * 100 if gross_income > 0 else 0.0
    yearly_in_hand = gross_income - tax_amount

    return TaxResult(
        regime=regime.name,
        tax_year=tax_year,
        gross_income=gross_income,
        standard_deduction=regime.standard_deduction,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        tax_amount=tax_amount,
        effective_tax_rate=round_half_up(effective_rate * 100) / 100,
        monthly_in_hand=round_half_up(yearly_in_hand / 12),
        yearly_in_hand=round_half_up(yearly_in_hand),
        deduction_breakdown=breakdown,
        slab_breakdown=slab_breakdown,
    )


# ===========================================================================
# COMPARE REGIMES — public API
# ===========================================================================

def _recommendation_text(old: TaxResult, new: TaxResult, savings: int) -> str:
    if old.tax_amount == new.tax_amount:
        return (
            f"Both regimes result in the same tax ({format_inr(old.tax_amount)}), "
            f"so you save {format_inr(0)} either way. "
            "The Old Tax Regime is recommended when the tax is equal."
        )
    if old.tax_amount < new.tax_amount:
        return (
            "The Old Tax Regime is better for you! "
            f"You'll save {format_inr(savings)} annually by choosing the Old Tax Regime. "
            f"This is because your deductions ({format_inr(old.total_deductions)}) provide "
            "significant tax benefits that outweigh the higher tax rates."
        )
    return (
        "The New Tax Regime is better for you! "
        f"You'll save {format_inr(savings)} annually by choosing the New Tax Regime. "
        "The lower tax rates provide more benefits than the deductions you could "
        "claim under the Old Tax Regime."
    )


def compare_regimes(
    income: IncomeProfile,
    deductions: DeductionProfile,
    *,
    tax_year: Optional[str] = None,
    rules: Optional[TaxYearRules] = None,
    cap_investments: bool = False,
) -> RegimeComparison:
    """
    Compute both regimes on the same raw input and recommend the cheaper one.

    Ties go to the Old Regime (old_tax <= new_tax). rules overrides the
    tax-year lookup; cap_investments clamps the 80C group at the year's cap
    before it reduces Old Regime taxable income.
    """
    if rules is None:
        rules = get_tax_year_rules(tax_year)
    cap = rules.investment_deduction_cap if cap_investments else None

    old = compute_regime_result(
        income, deductions, rules.old, investment_cap=cap, tax_year=rules.tax_year,
    )
    new = compute_regime_result(
        income, deductions, rules.new, investment_cap=cap, tax_year=rules.tax_year,
    )

    recommended = "old" if old.tax_amount <= new.tax_amount else "new"
    savings = abs(old.tax_amount - new.tax_amount)

    return RegimeComparison(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        recommendation=_recommendation_text(old, new, savings),
        tax_savings=savings,
        monthly_difference=abs(old.monthly_in_hand - new.monthly_in_hand),
        yearly_difference=abs(old.yearly_in_hand - new.yearly_in_hand),
    )


# ===========================================================================
# SECTION 80C UTILIZATION
# ===========================================================================

def compute_investment_cap_utilization(
    deductions: DeductionProfile,
    *,
    limit: Optional[float] = None,
    tax_year: Optional[str] = None,
) -> InvestmentCapUtilization:
    """
    How much of the 80C cap the investment-linked claims use.
    used is clamped at limit; claims above the cap are not reported.
    """
    if limit is None:
        limit = get_tax_year_rules(tax_year).investment_deduction_cap
    if limit <= 0:
        raise ValueError(f"Investment cap must be positive, got {limit}")

    used = min(limit, deductions.investment_total())
    return InvestmentCapUtilization(
        used=used,
        limit=limit,
        remaining=max(0.0, limit - used),
        utilization_percentage=round_half_up(used / limit * 100),
    )


__all__ = [
    "compute_gross_income",
    "compute_deduction_breakdown",
    "compute_total_deductions",
    "compute_slab_breakdown",
    "compute_tax_amount",
    "compute_regime_result",
    "compare_regimes",
    "compute_investment_cap_utilization",
]
