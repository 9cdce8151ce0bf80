"""
In-hand salary for one regime.

Payroll deductions (employee EPF + professional tax) leave the pay packet and
reduce taxable income. On top of that the regime's standard deduction applies,
and under the Old Regime the Rule 2A HRA exemption as well.
"""
from __future__ import annotations

from regimewise.engine.hra import compute_hra_exemption
from regimewise.engine.regimes import RegimeDefinition
from regimewise.engine.schemas import SalaryBreakdown
from regimewise.engine.tax_engine import compute_gross_income, compute_tax_amount
from regimewise.formatters import round_half_up
from regimewise.inputs.schemas import CityType, DeductionCategory, IncomeProfile, coerce_amount


def compute_salary_breakdown(
    income: IncomeProfile,
    regime: RegimeDefinition,
    *,
    epf_contribution: float = 0,
    professional_tax: float = 0,
    rent_paid: float = 0,
    city_type: CityType = CityType.metro,
) -> SalaryBreakdown:
    gross = compute_gross_income(income)
    allowances = gross - income.basic_salary
    payroll = coerce_amount(epf_contribution) + coerce_amount(professional_tax)

    hra_exemption = 0.0
    if regime.honors(DeductionCategory.HRA_EXEMPTION):
        hra_exemption = compute_hra_exemption(
            income.basic_salary, income.hra, rent_paid, city_type,
        ).exemption

    taxable = max(0.0, gross - payroll - regime.standard_deduction - hra_exemption)
    tax = compute_tax_amount(taxable, regime.slabs)
    net = gross - payroll - tax

    return SalaryBreakdown(
        regime=regime.name,
        gross_salary=gross,
        total_allowances=allowances,
        payroll_deductions=payroll,
        standard_deduction=regime.standard_deduction,
        hra_exemption=hra_exemption,
        taxable_income=taxable,
        tax_amount=tax,
        net_salary=net,
        monthly_in_hand=round_half_up(net / 12),
        yearly_in_hand=round_half_up(net),
        effective_tax_rate=round_half_up(tax / gross * 100 * 100) / 100 if gross > 0 else 0.0,
    )
