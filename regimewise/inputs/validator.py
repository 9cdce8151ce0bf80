"""
Deduction business-rule checks — soft warnings only.

Runs AFTER Pydantic structural validation. Unlike a hard validator nothing here
blocks a calculation: every finding becomes a plain-English warning returned
next to the result, and the engine still uses the raw claimed amounts.

Checks:
  1. Section 80C group total       <= investment cap of the tax year
  2. health_insurance_self          <= 25,000
  3. health_insurance_parents       <= 50,000 (senior-citizen parents)
  4. preventive_health_checkup      <= 5,000
  5. home_loan_interest             <= 2,00,000 (self-occupied property)
  6. interest_on_savings            <= 10,000 (Section 80TTA)
"""
from __future__ import annotations

import logging

from regimewise.formatters import format_inr
from regimewise.inputs.schemas import DeductionCategory, DeductionProfile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Individual caps — the 80C cap comes from the tax-year rules instead
# ---------------------------------------------------------------------------
_CAP_80D_SELF              = 25_000
_CAP_80D_PARENTS           = 50_000
_CAP_80D_PREVENTIVE        = 5_000
_CAP_24B                   = 200_000
_CAP_80TTA                 = 10_000

_INDIVIDUAL_CAPS: list[tuple[DeductionCategory, float, str]] = [
    (DeductionCategory.HEALTH_INSURANCE_SELF, _CAP_80D_SELF,
     "Section 80D self/family health insurance"),
    (DeductionCategory.HEALTH_INSURANCE_PARENTS, _CAP_80D_PARENTS,
     "Section 80D parents health insurance (senior citizens)"),
    (DeductionCategory.PREVENTIVE_HEALTH_CHECKUP, _CAP_80D_PREVENTIVE,
     "Section 80D preventive health check-up"),
    (DeductionCategory.HOME_LOAN_INTEREST, _CAP_24B,
     "Section 24(b) home loan interest"),
    (DeductionCategory.INTEREST_ON_SAVINGS, _CAP_80TTA,
     "Section 80TTA savings interest"),
]


def collect_deduction_warnings(
    deductions: DeductionProfile,
    investment_cap: float,
    *,
    cap_enforced: bool = False,
) -> list[str]:
    """
    Return one warning per claim above its statutory limit.

    Args:
        deductions: Claimed amounts (already coerced by the schema).
        investment_cap: Section 80C cap for the tax year in use.
        cap_enforced: Whether the engine clamps the 80C group; only changes
            the wording of the 80C warning.
    """
    warnings: list[str] = []

    # ---- 1. Section 80C combined cap ----------------------------------------
    investment_total = deductions.investment_total()
    if investment_total > investment_cap:
        consequence = (
            f"only {format_inr(investment_cap)} was deducted"
            if cap_enforced
            else "the full amount was deducted under the Old Regime, but "
                 f"only {format_inr(investment_cap)} is allowed when filing"
        )
        warnings.append(
            f"Section 80C investments total {format_inr(investment_total)}, above the "
            f"{format_inr(investment_cap)} limit; {consequence}."
        )

    # ---- 2-6. Individually capped claims ------------------------------------
    for category, cap, label in _INDIVIDUAL_CAPS:
        claimed = deductions.amount(category)
        if claimed > cap:
            warnings.append(
                f"{label}: {format_inr(claimed)} claimed, above the "
                f"{format_inr(cap)} limit."
            )

    if warnings:
        # Count only — never log claimed amounts
        logger.info("Deduction checks raised %d warning(s)", len(warnings))
    return warnings


__all__ = ["collect_deduction_warnings"]
