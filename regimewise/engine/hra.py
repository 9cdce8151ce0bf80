"""
HRA exemption under Section 10(13A), Rule 2A. All inputs are annual.

Exemption = minimum of:
  1. HRA received from employer
  2. Rent paid − 10% of basic salary   ← clipped at 0
  3. 50% of basic (metro) or 40% of basic (non-metro)
"""
from __future__ import annotations

from regimewise.engine.schemas import HraExemption
from regimewise.formatters import round_half_up
from regimewise.inputs.schemas import CityType, coerce_amount

METRO_PCT = 0.50
NON_METRO_PCT = 0.40
RENT_BASIC_PCT = 0.10


def compute_hra_exemption(
    basic_salary: float,
    hra_received: float,
    rent_paid: float,
    city_type: CityType = CityType.metro,
) -> HraExemption:
    basic = coerce_amount(basic_salary)
    hra = coerce_amount(hra_received)
    rent = coerce_amount(rent_paid)

    city_pct = METRO_PCT if city_type == CityType.metro else NON_METRO_PCT
    rent_excess = max(0.0, rent - RENT_BASIC_PCT * basic)
    city_limit = city_pct * basic

    exemption = min(hra, rent_excess, city_limit)
    return HraExemption(
        hra_received=hra,
        rent_minus_tenth_basic=rent_excess,
        city_limit=city_limit,
        exemption=exemption,
        taxable_hra=max(0.0, hra - exemption),
        required_rent=round_half_up(hra + RENT_BASIC_PCT * basic),
    )
