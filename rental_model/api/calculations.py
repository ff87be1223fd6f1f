"""
Financial calculation API endpoints.

These endpoints accept a scenario snapshot and return the calculated
results. Nothing is stored: every request recomputes from its inputs.
"""

import logging
import math
from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from rental_model.config import get_settings
from rental_model.calculations import amortization, irr, resale, returns, self_financing, taxation
from rental_model.calculations.models import (
    PropertyAsset,
    Loan,
    RentalData,
    TaxProfile,
    TaxRegime,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class PropertyInput(BaseModel):
    """Property input schema."""

    purchase_price: float
    agency_fee: float = 0.0
    renovation_cost: float = 0.0
    notary_fee: float = 0.0
    land_value_fraction: float = 0.10


class LoanInput(BaseModel):
    """
    Loan input schema.

    When principal is omitted it is resolved as the acquisition cost minus
    the down payment.
    """

    principal: Optional[float] = None
    down_payment: float = 0.0
    annual_rate: float
    years: int
    origination_fee: float = 0.0
    insurance_rate: float = 0.0


class RentalInput(BaseModel):
    """Rental input schema."""

    monthly_rent: float
    recoverable_charges: float = 0.0
    occupancy_rate: float = 0.95
    management_fee_rate: float = 0.08


class TaxInput(BaseModel):
    """Tax profile input schema."""

    regime: TaxRegime = TaxRegime.lmnp
    income_tax_rate: float = 0.30
    social_levy_rate: float = 0.17


class FinancingInput(BaseModel):
    """Property and loan, enough for amortization and resale."""

    property: PropertyInput
    loan: LoanInput
    start_date: Optional[date] = None


class ScenarioInput(BaseModel):
    """Full investment scenario."""

    property: PropertyInput
    loan: LoanInput
    rental: RentalInput
    tax: TaxInput = Field(default_factory=TaxInput)
    holding_years: Optional[int] = None
    appreciation_rate: Optional[float] = None
    sale_costs: float = 0.0


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    guess: Optional[float] = None


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: Optional[float] = None
    converged: bool
    iterations: int
    npv_at_10_percent: Optional[float] = None


def _json_safe(value):
    """Replace non-finite floats (inf, nan) with None, recursively."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


def _to_property(inputs: PropertyInput) -> PropertyAsset:
    return PropertyAsset(**inputs.model_dump())


def _to_loan(inputs: LoanInput, property_asset: PropertyAsset) -> Loan:
    principal = inputs.principal
    if principal is None:
        principal = amortization.calculate_borrowed_amount(property_asset, inputs.down_payment)

    return amortization.build_loan(
        principal=principal,
        annual_rate=inputs.annual_rate,
        years=inputs.years,
        origination_fee=inputs.origination_fee,
        insurance_rate=inputs.insurance_rate,
    )


def _to_snapshot(inputs: ScenarioInput):
    property_asset = _to_property(inputs.property)
    loan = _to_loan(inputs.loan, property_asset)
    rental = RentalData(**inputs.rental.model_dump())
    tax_profile = TaxProfile(**inputs.tax.model_dump())
    return property_asset, loan, rental, tax_profile


def _horizon(inputs: ScenarioInput):
    """Holding years and appreciation rate, falling back to the settings."""
    settings = get_settings()
    holding_years = inputs.holding_years
    if holding_years is None:
        holding_years = settings.default_holding_years
    appreciation_rate = inputs.appreciation_rate
    if appreciation_rate is None:
        appreciation_rate = settings.default_appreciation_rate
    return holding_years, appreciation_rate


@router.post("/amortization")
async def calculate_amortization(inputs: FinancingInput):
    """Generate the loan amortization schedule."""
    property_asset = _to_property(inputs.property)
    loan = _to_loan(inputs.loan, property_asset)
    logger.info(
        "Amortization requested: principal=%s rate=%s years=%s",
        loan.principal,
        loan.annual_rate,
        loan.years,
    )

    schedule = amortization.loan_schedule(loan, inputs.start_date)

    return _json_safe(
        {
            "principal": loan.principal,
            "monthly_payment": loan.monthly_payment,
            "monthly_insurance": amortization.calculate_monthly_insurance(loan),
            "schedule": schedule,
            "total_interest": amortization.calculate_total_interest(schedule),
            "total_cost": amortization.calculate_total_cost(loan),
        }
    )


@router.post("/self-financing")
async def calculate_self_financing(inputs: ScenarioInput):
    """Calculate the monthly self-financing position."""
    property_asset, loan, rental, _ = _to_snapshot(inputs)
    logger.info("Self-financing requested: price=%s", property_asset.purchase_price)

    result = self_financing.calculate_self_financing(property_asset, loan, rental)
    return _json_safe(asdict(result))


@router.post("/taxation")
async def calculate_taxation(inputs: ScenarioInput):
    """Calculate the annual tax position."""
    property_asset, loan, rental, tax_profile = _to_snapshot(inputs)
    holding_years, _ = _horizon(inputs)
    logger.info("Taxation requested: regime=%s", tax_profile.regime.value)

    result = taxation.calculate_taxation(
        property_asset, loan, rental, tax_profile, holding_years
    )
    return _json_safe(asdict(result))


@router.post("/resale")
async def calculate_resale(inputs: ScenarioInput):
    """Project a resale at the end of the holding period."""
    property_asset, loan, _, _ = _to_snapshot(inputs)
    holding_years, appreciation_rate = _horizon(inputs)
    logger.info(
        "Resale requested: holding_years=%s appreciation=%s",
        holding_years,
        appreciation_rate,
    )

    result = resale.project_resale(
        property_asset, loan, holding_years, appreciation_rate, inputs.sale_costs
    )
    return _json_safe(asdict(result))


@router.post("/yields")
async def calculate_yields(inputs: ScenarioInput):
    """Calculate yields, ROI, payback period and IRR."""
    property_asset, loan, rental, tax_profile = _to_snapshot(inputs)
    holding_years, appreciation_rate = _horizon(inputs)
    logger.info("Yields requested: holding_years=%s", holding_years)

    result = returns.calculate_yields(
        property_asset, loan, rental, tax_profile, appreciation_rate, holding_years
    )
    project_irr = returns.calculate_project_irr(
        property_asset, loan, rental, tax_profile, appreciation_rate, holding_years
    )

    payload = asdict(result)
    payload["irr"] = project_irr
    return _json_safe(payload)


@router.post("/analysis")
async def calculate_analysis(inputs: ScenarioInput):
    """Run every calculator on the scenario."""
    property_asset, loan, rental, tax_profile = _to_snapshot(inputs)
    holding_years, appreciation_rate = _horizon(inputs)
    logger.info("Full analysis requested: holding_years=%s", holding_years)

    result = returns.analyze_investment(
        property_asset,
        loan,
        rental,
        tax_profile,
        appreciation_rate,
        holding_years,
        inputs.sale_costs,
    )
    return _json_safe(asdict(result))


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for given annual cash flows."""
    if len(inputs.cash_flows) < 2:
        raise HTTPException(status_code=400, detail="At least 2 cash flows required")

    settings = get_settings()
    guess = inputs.guess if inputs.guess is not None else settings.irr_guess

    solution = irr.solve_irr(
        inputs.cash_flows,
        guess=guess,
        precision=settings.irr_precision,
        max_iterations=settings.irr_max_iterations,
    )

    return IRRResponse(
        **_json_safe(
            {
                "irr": solution.rate,
                "converged": solution.converged,
                "iterations": solution.iterations,
                "npv_at_10_percent": irr.calculate_npv(inputs.cash_flows, 0.10),
            }
        )
    )
