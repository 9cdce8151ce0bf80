"""
Engine HTTP routes — POST /api/calculate,
                     POST /api/investment-cap,
                     POST /api/hra,
                     POST /api/salary,
                     GET  /api/regimes,
                     GET  /api/regimes/{tax_year}

Thin async wrappers around the pure engine: no persistence, no I/O.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from regimewise.config import settings
from regimewise.engine.hra import compute_hra_exemption
from regimewise.engine.regimes import (
    RegimeDefinition,
    TaxYearRules,
    UnknownTaxYearError,
    get_tax_year_rules,
    supported_tax_years,
)
from regimewise.engine.salary import compute_salary_breakdown
from regimewise.engine.schemas import (
    CalculateRequest,
    CalculateResponse,
    HraRequest,
    RegimeView,
    SalaryRequest,
)
from regimewise.engine.tax_engine import compare_regimes, compute_investment_cap_utilization
from regimewise.formatters import format_tax_slab
from regimewise.inputs.schemas import DeductionProfile
from regimewise.inputs.validator import collect_deduction_warnings

router = APIRouter(prefix="/api", tags=["engine"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_rules(tax_year: Optional[str]) -> TaxYearRules:
    """Tax-year rules or a 404 NOT_FOUND via the HTTP exception handler."""
    try:
        return get_tax_year_rules(tax_year)
    except UnknownTaxYearError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _regime_view(regime: RegimeDefinition) -> RegimeView:
    return RegimeView(
        name=regime.name,
        description=regime.description,
        standard_deduction=regime.standard_deduction,
        allowed_deductions=list(regime.allowed_deductions),
        slabs=[format_tax_slab(s.lower, s.upper, s.rate) for s in regime.slabs],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/calculate")
async def calculate_tax(body: CalculateRequest) -> JSONResponse:
    """
    Compare Old vs New regime for one income + deduction profile.

    Returns the comparison, the Section 80C utilization report and any soft
    deduction warnings. Whether the 80C group is clamped inside the tax
    computation follows settings.enforce_investment_cap.
    """
    rules = _resolve_rules(body.tax_year)
    cap_enforced = settings.enforce_investment_cap

    comparison = compare_regimes(
        body.income, body.deductions, rules=rules, cap_investments=cap_enforced,
    )
    response = CalculateResponse(
        tax_year=rules.tax_year,
        investment_cap_enforced=cap_enforced,
        comparison=comparison,
        investment_cap=compute_investment_cap_utilization(
            body.deductions, limit=rules.investment_deduction_cap,
        ),
        warnings=collect_deduction_warnings(
            body.deductions, rules.investment_deduction_cap, cap_enforced=cap_enforced,
        ),
    )

    # No income figures in logs
    logger.info(
        "Tax calculated tax_year=%s recommended=%s warnings=%d",
        rules.tax_year,
        comparison.recommended_regime,
        len(response.warnings),
    )
    return JSONResponse(status_code=200, content=response.model_dump(mode="json"))


@router.post("/investment-cap")
async def investment_cap(
    deductions: DeductionProfile,
    tax_year: Optional[str] = None,
) -> JSONResponse:
    """Section 80C utilization for the claimed investment-linked deductions."""
    rules = _resolve_rules(tax_year)
    report = compute_investment_cap_utilization(
        deductions, limit=rules.investment_deduction_cap,
    )
    return JSONResponse(status_code=200, content=report.model_dump(mode="json"))


@router.post("/hra")
async def hra_exemption(body: HraRequest) -> JSONResponse:
    """HRA exemption (Rule 2A) from annual basic, HRA and rent."""
    result = compute_hra_exemption(
        body.basic_salary, body.hra_received, body.rent_paid, body.city_type,
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/salary")
async def salary_breakdown(body: SalaryRequest) -> JSONResponse:
    """In-hand salary under one regime."""
    rules = _resolve_rules(body.tax_year)
    result = compute_salary_breakdown(
        body.income,
        rules.regime(body.regime),
        epf_contribution=body.epf_contribution,
        professional_tax=body.professional_tax,
        rent_paid=body.rent_paid,
        city_type=body.city_type,
    )
    logger.info("Salary breakdown computed tax_year=%s regime=%s", rules.tax_year, body.regime)
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.get("/regimes")
async def list_tax_years() -> dict:
    """Tax years with registered rules."""
    return {
        "default_tax_year": settings.default_tax_year,
        "tax_years": supported_tax_years(),
    }


@router.get("/regimes/{tax_year}")
async def get_regimes(tax_year: str) -> JSONResponse:
    """Both regime definitions for a tax year, slabs formatted for display."""
    rules = _resolve_rules(tax_year)
    content = {
        "tax_year": rules.tax_year,
        "investment_deduction_cap": rules.investment_deduction_cap,
        "old": _regime_view(rules.old).model_dump(mode="json"),
        "new": _regime_view(rules.new).model_dump(mode="json"),
    }
    return JSONResponse(status_code=200, content=content)
