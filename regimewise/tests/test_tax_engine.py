"""
Tax engine test suite — FY 2025-26
All expected values hand-computed band by band (see comments on each case).
Tax amounts are whole rupees, so monetary assertions are exact.

Groups:
  1. Named constant verification
  2. Parametrised regime-comparison cases
  3. Slab tax properties (zero, monotonic, continuity, rounding)
  4. Deduction aggregation and regime isolation
  5. Section 80C cap: utilization report and optional enforcement
  6. Input coercion and idempotence
"""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from regimewise.engine.regimes import (
    CAP_80C,
    FY2025_26,
    NEW_REGIME_FY2025_26,
    NEW_STD_DEDUCTION,
    OLD_REGIME_FY2025_26,
    OLD_STD_DEDUCTION,
    SlabTableError,
    TaxSlab,
)
from regimewise.engine.tax_engine import (
    compare_regimes,
    compute_deduction_breakdown,
    compute_gross_income,
    compute_investment_cap_utilization,
    compute_regime_result,
    compute_slab_breakdown,
    compute_tax_amount,
    compute_total_deductions,
)
from regimewise.inputs.schemas import (
    MAX_AMOUNT,
    DeductionCategory,
    DeductionProfile,
    IncomeProfile,
)
from regimewise.tests.demo_profiles import DEMO_PROFILES

OLD_SLABS = OLD_REGIME_FY2025_26.slabs
NEW_SLABS = NEW_REGIME_FY2025_26.slabs


# ===========================================================================
# TEST GROUP 1: Named constant verification
# ===========================================================================

def test_standard_deduction_constants() -> None:
    assert OLD_STD_DEDUCTION == 50_000
    assert NEW_STD_DEDUCTION == 75_000
    assert CAP_80C == 150_000


def test_old_regime_slab_table() -> None:
    assert [(s.lower, s.upper, s.rate) for s in OLD_SLABS] == [
        (0, 300_000, 0),
        (300_000, 600_000, 5),
        (600_000, 900_000, 10),
        (900_000, 1_200_000, 15),
        (1_200_000, 1_500_000, 20),
        (1_500_000, None, 30),
    ]


def test_new_regime_slab_table() -> None:
    assert [(s.lower, s.upper, s.rate) for s in NEW_SLABS] == [
        (0, 400_000, 0),
        (400_000, 800_000, 5),
        (800_000, 1_200_000, 10),
        (1_200_000, 1_600_000, 15),
        (1_600_000, 2_000_000, 20),
        (2_000_000, 2_400_000, 25),
        (2_400_000, None, 30),
    ]


# ===========================================================================
# TEST GROUP 2: Parametrised regime comparison cases
# ===========================================================================

@dataclass
class TaxCase:
    """Single parametrised test case for compare_regimes()."""
    description: str
    income_kwargs: dict
    deduction_kwargs: dict
    expected_old_tax: int
    expected_new_tax: int
    expected_regime: str          # "old" | "new"
    expected_savings: int = field(default=0)


TAX_CASES: list[TaxCase] = [
    *[
        TaxCase(
            description=f"demo_{name}",
            income_kwargs=data["income"],
            deduction_kwargs=data["deductions"],
            **data["expected"],
        )
        for name, data in DEMO_PROFILES.items()
    ],
    TaxCase(
        description="zero_income_tie_goes_to_old",
        income_kwargs={},
        deduction_kwargs=dict(ppf=100_000),
        expected_old_tax=0,
        expected_new_tax=0,
        expected_regime="old",
    ),
    TaxCase(
        description="both_inside_zero_band_tie_goes_to_old",
        income_kwargs=dict(basic_salary=350_000),
        deduction_kwargs={},
        # OLD: taxable=300000 (top of 0% band) → 0
        # NEW: taxable=275000 → 0
        expected_old_tax=0,
        expected_new_tax=0,
        expected_regime="old",
    ),
    TaxCase(
        description="gross_5L_first_taxed_band_only",
        income_kwargs=dict(basic_salary=500_000),
        deduction_kwargs={},
        # OLD: taxable=450000, 5%*150000=7500
        # NEW: taxable=425000, 5%*25000=1250
        expected_old_tax=7_500,
        expected_new_tax=1_250,
        expected_regime="new",
        expected_savings=6_250,
    ),
    TaxCase(
        description="old_taxable_exactly_at_12L_boundary",
        income_kwargs=dict(basic_salary=1_250_000),
        deduction_kwargs={},
        # OLD: taxable=1200000, 15000+30000+45000=90000
        # NEW: taxable=1175000, 20000+10%*375000=57500
        expected_old_tax=90_000,
        expected_new_tax=57_500,
        expected_regime="new",
        expected_savings=32_500,
    ),
    TaxCase(
        description="exact_tax_tie_goes_to_old",
        income_kwargs=dict(basic_salary=875_000),
        deduction_kwargs=dict(ppf=100_000, health_insurance_self=25_000, home_loan_interest=50_000),
        # OLD: ded=50000+175000=225000, taxable=650000, 15000+10%*50000=20000
        # NEW: taxable=800000, 5%*400000=20000
        expected_old_tax=20_000,
        expected_new_tax=20_000,
        expected_regime="old",
    ),
    TaxCase(
        description="deductions_exceed_gross_taxable_floored_at_zero",
        income_kwargs=dict(basic_salary=200_000),
        deduction_kwargs=dict(elss=150_000, hra_exemption=100_000),
        expected_old_tax=0,
        expected_new_tax=0,
        expected_regime="old",
    ),
    TaxCase(
        description="new_regime_ignores_every_itemised_deduction",
        income_kwargs=dict(basic_salary=1_675_000),
        deduction_kwargs=dict(
            elss=150_000, health_insurance_self=25_000, home_loan_interest=200_000,
        ),
        # OLD: ded=50000+375000=425000, taxable=1250000
        #      15000+30000+45000+20%*50000=100000
        # NEW: taxable=1600000, 20000+40000+60000=120000
        expected_old_tax=100_000,
        expected_new_tax=120_000,
        expected_regime="old",
        expected_savings=20_000,
    ),
]


@pytest.mark.parametrize(
    "case",
    [pytest.param(c, id=c.description) for c in TAX_CASES],
)
def test_regime_comparison(case: TaxCase) -> None:
    """
    Verify compare_regimes() against hand-computed expected values.
    If this test fails, the TAX ENGINE is wrong, not the expected value.
    """
    result = compare_regimes(
        IncomeProfile(**case.income_kwargs),
        DeductionProfile(**case.deduction_kwargs),
    )

    assert result.old_regime.tax_amount == case.expected_old_tax, (
        f"OLD REGIME: expected ₹{case.expected_old_tax:,}, got ₹{result.old_regime.tax_amount:,}"
    )
    assert result.new_regime.tax_amount == case.expected_new_tax, (
        f"NEW REGIME: expected ₹{case.expected_new_tax:,}, got ₹{result.new_regime.tax_amount:,}"
    )
    assert result.recommended_regime == case.expected_regime
    assert result.tax_savings == case.expected_savings


def test_scenario_old_regime_10L_no_deductions() -> None:
    """₹10L gross, Old Regime: ₹50K standard deduction → taxable ₹9.5L → ₹52,500."""
    income = IncomeProfile(basic_salary=1_000_000)
    result = compute_regime_result(income, DeductionProfile(), OLD_REGIME_FY2025_26)

    assert result.gross_income == 1_000_000
    assert result.total_deductions == 50_000
    assert result.taxable_income == 950_000
    assert result.tax_amount == 52_500
    assert result.effective_tax_rate == 5.25
    assert result.yearly_in_hand == 947_500
    assert result.monthly_in_hand == 78_958      # 78958.33
    assert [b.taxed_amount for b in result.slab_breakdown] == [
        300_000, 300_000, 300_000, 50_000,
    ]


def test_scenario_new_regime_10L_no_deductions() -> None:
    """₹10L gross, New Regime: ₹75K standard deduction → taxable ₹9.25L → ₹32,500."""
    result = compute_regime_result(
        IncomeProfile(basic_salary=1_000_000), DeductionProfile(), NEW_REGIME_FY2025_26,
    )
    assert result.taxable_income == 925_000
    assert result.tax_amount == 32_500
    assert result.effective_tax_rate == 3.25
    assert result.monthly_in_hand == 80_625


def test_comparison_differences_and_recommendation_text() -> None:
    result = compare_regimes(IncomeProfile(basic_salary=1_000_000), DeductionProfile())

    assert result.recommended_regime == "new"
    assert result.tax_savings == 20_000
    assert result.yearly_difference == 20_000
    assert result.monthly_difference == 80_625 - 78_958
    assert "New Tax Regime is better" in result.recommendation
    assert "₹20,000" in result.recommendation


def test_old_regime_recommendation_mentions_deductions() -> None:
    data = DEMO_PROFILES["investor"]
    result = compare_regimes(
        IncomeProfile(**data["income"]), DeductionProfile(**data["deductions"]),
    )
    assert result.recommended_regime == "old"
    assert "Old Tax Regime is better" in result.recommendation
    assert "₹1,02,500" in result.recommendation
    assert "₹8,50,000" in result.recommendation     # total old deductions


def test_tie_recommendation_text_states_zero_saving() -> None:
    result = compare_regimes(IncomeProfile(), DeductionProfile())
    assert result.recommended_regime == "old"
    assert result.tax_savings == 0
    assert "same tax" in result.recommendation
    assert "₹0" in result.recommendation


def test_zero_income_everything_zero() -> None:
    """Gross 0: deductions cannot push taxable negative; all outputs 0."""
    result = compare_regimes(IncomeProfile(), DeductionProfile(elss=150_000))
    for regime in (result.old_regime, result.new_regime):
        assert regime.taxable_income == 0
        assert regime.tax_amount == 0
        assert regime.effective_tax_rate == 0
        assert regime.monthly_in_hand == 0
        assert regime.yearly_in_hand == 0


def test_results_carry_tax_year() -> None:
    result = compare_regimes(IncomeProfile(basic_salary=1), DeductionProfile())
    assert result.old_regime.tax_year == FY2025_26
    assert result.new_regime.tax_year == FY2025_26


# ===========================================================================
# TEST GROUP 3: Slab tax properties
# ===========================================================================

@pytest.mark.parametrize("slabs", [OLD_SLABS, NEW_SLABS], ids=["old", "new"])
def test_tax_of_zero_and_negative_income_is_zero(slabs) -> None:
    assert compute_tax_amount(0, slabs) == 0
    assert compute_tax_amount(-100_000, slabs) == 0


@pytest.mark.parametrize("slabs", [OLD_SLABS, NEW_SLABS], ids=["old", "new"])
def test_tax_is_monotonically_non_decreasing(slabs) -> None:
    previous = 0
    for income in range(0, 3_500_001, 12_345):
        tax = compute_tax_amount(income, slabs)
        assert tax >= previous, f"tax dropped at income {income}"
        previous = tax


@pytest.mark.parametrize("slabs", [OLD_SLABS, NEW_SLABS], ids=["old", "new"])
def test_tax_is_continuous_at_band_boundaries(slabs) -> None:
    """One rupee either side of a boundary moves tax by at most one (rounded) rupee."""
    for slab in slabs[1:]:
        b = slab.lower
        below, at, above = (compute_tax_amount(x, slabs) for x in (b - 1, b, b + 1))
        assert 0 <= at - below <= 1
        assert 0 <= above - at <= 1


def test_tax_inside_top_band_uses_top_rate() -> None:
    # Old: 150000 up to 15L, then 30% on the rest
    assert compute_tax_amount(2_500_000, OLD_SLABS) == 150_000 + 300_000
    # New: 300000 up to 24L, then 30% on the rest
    assert compute_tax_amount(3_400_000, NEW_SLABS) == 300_000 + 300_000


def test_tax_rounds_half_up_to_whole_rupee() -> None:
    # 5% of ₹10 = ₹0.50 → ₹1
    assert compute_tax_amount(300_010, OLD_SLABS) == 1
    # 5% of ₹9 = ₹0.45 → ₹0
    assert compute_tax_amount(300_009, OLD_SLABS) == 0


def test_zero_rate_band_contributes_nothing() -> None:
    breakdown = compute_slab_breakdown(500_000, NEW_SLABS)
    assert breakdown[0].rate == 0
    assert breakdown[0].taxed_amount == 400_000
    assert breakdown[0].tax == 0
    assert breakdown[1].tax == pytest.approx(5_000)


def test_empty_slab_table_raises() -> None:
    with pytest.raises(SlabTableError):
        compute_tax_amount(100_000, [])


def test_malformed_slab_table_raises() -> None:
    gap = [
        TaxSlab(lower=0, upper=100_000, rate=0),
        TaxSlab(lower=200_000, upper=None, rate=10),
    ]
    with pytest.raises(SlabTableError):
        compute_tax_amount(300_000, gap)


def test_single_unbounded_band_is_flat_tax() -> None:
    flat = [TaxSlab(lower=0, upper=None, rate=10)]
    assert compute_tax_amount(123_456, flat) == 12_346   # 12345.6


# ===========================================================================
# TEST GROUP 4: Deduction aggregation and regime isolation
# ===========================================================================

_EVERY_DEDUCTION = DeductionProfile(**{
    c.value: 1_000 for c in DeductionCategory if c is not DeductionCategory.STANDARD_DEDUCTION
})


def test_gross_income_sums_every_component() -> None:
    income = IncomeProfile(**{name: 10_000 for name in IncomeProfile.model_fields})
    assert compute_gross_income(income) == 10_000 * len(IncomeProfile.model_fields)


def test_old_regime_honors_every_deduction_plus_standard() -> None:
    total = compute_total_deductions(_EVERY_DEDUCTION, OLD_REGIME_FY2025_26)
    assert total == OLD_STD_DEDUCTION + 1_000 * len(DeductionProfile.model_fields)


def test_new_regime_honors_only_standard_deduction() -> None:
    assert compute_total_deductions(_EVERY_DEDUCTION, NEW_REGIME_FY2025_26) == NEW_STD_DEDUCTION
    breakdown = compute_deduction_breakdown(_EVERY_DEDUCTION, NEW_REGIME_FY2025_26)
    assert breakdown == {DeductionCategory.STANDARD_DEDUCTION: NEW_STD_DEDUCTION}


def test_every_category_maps_to_a_profile_field() -> None:
    fields = set(DeductionProfile.model_fields)
    categories = {c.value for c in DeductionCategory} - {"standard_deduction"}
    assert categories == fields


@pytest.mark.parametrize(
    "income_kwargs,deduction_kwargs",
    [
        (dict(basic_salary=1_000_000), {}),
        (dict(basic_salary=100_000), dict(elss=150_000)),
        (dict(basic_salary=2_000_000, rsus=750_000), dict(hra_exemption=400_000, lta=30_000)),
    ],
)
def test_taxable_income_identity(income_kwargs: dict, deduction_kwargs: dict) -> None:
    income = IncomeProfile(**income_kwargs)
    deductions = DeductionProfile(**deduction_kwargs)
    for regime in (OLD_REGIME_FY2025_26, NEW_REGIME_FY2025_26):
        result = compute_regime_result(income, deductions, regime)
        assert result.taxable_income == max(0, result.gross_income - result.total_deductions)
        assert result.tax_amount >= 0


# ===========================================================================
# TEST GROUP 5: Section 80C cap
# ===========================================================================

_OVER_CAP = DeductionProfile(elss=100_000, ppf=100_000)   # ₹2L claimed, cap ₹1.5L


def test_utilization_clamps_at_cap() -> None:
    report = compute_investment_cap_utilization(_OVER_CAP)
    assert report.used == 150_000
    assert report.limit == 150_000
    assert report.remaining == 0
    assert report.utilization_percentage == 100


def test_utilization_partial() -> None:
    report = compute_investment_cap_utilization(DeductionProfile(epf=50_000, nsc=25_000))
    assert report.used == 75_000
    assert report.remaining == 75_000
    assert report.utilization_percentage == 50


def test_utilization_ignores_non_investment_deductions() -> None:
    report = compute_investment_cap_utilization(
        DeductionProfile(health_insurance_self=25_000, home_loan_interest=200_000),
    )
    assert report.used == 0
    assert report.utilization_percentage == 0


def test_utilization_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        compute_investment_cap_utilization(_OVER_CAP, limit=0)


def test_total_deductions_do_not_apply_cap_by_default() -> None:
    """Default behavior: the full ₹2L reduces Old Regime taxable income."""
    assert compute_total_deductions(_OVER_CAP, OLD_REGIME_FY2025_26) == 50_000 + 200_000


def test_total_deductions_with_cap_clamp_investment_group() -> None:
    total = compute_total_deductions(_OVER_CAP, OLD_REGIME_FY2025_26, investment_cap=CAP_80C)
    assert total == 50_000 + 150_000
    breakdown = compute_deduction_breakdown(
        _OVER_CAP, OLD_REGIME_FY2025_26, investment_cap=CAP_80C,
    )
    assert breakdown[DeductionCategory.ELSS] == 100_000
    assert breakdown[DeductionCategory.PPF] == 50_000


def test_cap_does_not_touch_other_groups() -> None:
    deductions = DeductionProfile(elss=200_000, home_loan_interest=200_000)
    total = compute_total_deductions(deductions, OLD_REGIME_FY2025_26, investment_cap=CAP_80C)
    assert total == 50_000 + 150_000 + 200_000


def test_compare_regimes_cap_flips_recommendation() -> None:
    """
    ₹10L gross, ₹2L 80C claimed.
    Uncapped OLD: taxable=750000 → 15000+15000=30000 ≤ NEW 32500 → old.
    Capped OLD:   taxable=800000 → 15000+20000=35000 >  NEW 32500 → new.
    """
    income = IncomeProfile(basic_salary=1_000_000)

    uncapped = compare_regimes(income, _OVER_CAP)
    assert uncapped.old_regime.tax_amount == 30_000
    assert uncapped.recommended_regime == "old"

    capped = compare_regimes(income, _OVER_CAP, cap_investments=True)
    assert capped.old_regime.tax_amount == 35_000
    assert capped.new_regime.tax_amount == 32_500
    assert capped.recommended_regime == "new"
    assert capped.tax_savings == 2_500


# ===========================================================================
# TEST GROUP 6: Input coercion and idempotence
# ===========================================================================

def test_invalid_amounts_coerce_to_zero() -> None:
    income = IncomeProfile(
        basic_salary=-5,
        hra=float("nan"),
        special_allowance=None,
        transport_allowance="abc",
        medical_allowance="1000",
        performance_bonus=float("inf"),
    )
    assert compute_gross_income(income) == 1_000


def test_integer_too_large_for_float_coerces_to_zero() -> None:
    assert IncomeProfile(basic_salary=10**400).basic_salary == 0
    assert DeductionProfile(elss=-(10**400)).elss == 0


def test_huge_amounts_clamp_and_comparison_stays_finite() -> None:
    """
    Two 1e308 fields would sum to inf; each clamps at MAX_AMOUNT instead.
    NEW: gross 2e15, taxable 2e15-75000.
    Bands up to ₹24L: 20000+40000+60000+80000+100000 = 300000.
    Above ₹24L at 30%: (2e15 - 75000 - 2400000) × 0.30 = 599999999257500.
    """
    income = IncomeProfile(basic_salary=1e308, hra=1e308)
    assert income.basic_salary == MAX_AMOUNT

    result = compare_regimes(income, DeductionProfile())
    assert result.new_regime.gross_income == 2 * MAX_AMOUNT
    assert result.new_regime.tax_amount == 599_999_999_557_500
    assert result.new_regime.yearly_in_hand == 2_000_000_000_000_000 - 599_999_999_557_500
    assert result.recommended_regime == "new"


def test_tax_amount_on_near_max_float_does_not_overflow() -> None:
    assert compute_tax_amount(1e308, NEW_SLABS) > 0


def test_unknown_income_field_rejected() -> None:
    with pytest.raises(ValueError):
        IncomeProfile(basic_salary=1, signing_bonus=5)


def test_calls_are_idempotent() -> None:
    data = DEMO_PROFILES["investor"]
    income = IncomeProfile(**data["income"])
    deductions = DeductionProfile(**data["deductions"])

    assert compute_gross_income(income) == compute_gross_income(income)
    assert compute_total_deductions(deductions, OLD_REGIME_FY2025_26) == (
        compute_total_deductions(deductions, OLD_REGIME_FY2025_26)
    )
    assert compute_tax_amount(1_234_567, OLD_SLABS) == compute_tax_amount(1_234_567, OLD_SLABS)
    assert compare_regimes(income, deductions) == compare_regimes(income, deductions)
