"""
Self-Financing Calculations

Monthly cash inflows and outflows of a rental property and the resulting
self-financing ratio (inflow / outflow).
"""

import logging

from rental_model.calculations.models import (
    PropertyAsset,
    Loan,
    RentalData,
    SelfFinancingResult,
    InflowBreakdown,
    OutflowBreakdown,
)
from rental_model.calculations.amortization import calculate_monthly_insurance
from rental_model.calculations.ratios import calculate_ratio

logger = logging.getLogger(__name__)

# Annual recurring charges as a share of the purchase price
PROPERTY_TAX_RATE = 0.01
LANDLORD_INSURANCE_RATE = 0.002
CO_OWNERSHIP_RATE = 0.02

# Provisions as a share of the monthly rent
VACANCY_PROVISION_RATE = 0.05
RENOVATION_PROVISION_RATE = 0.10


def estimate_property_tax(purchase_price: float) -> float:
    """Monthly property tax, about 1% of the price per year."""
    return (purchase_price * PROPERTY_TAX_RATE) / 12


def estimate_landlord_insurance(purchase_price: float) -> float:
    """Monthly non-occupant landlord insurance, about 0.2% of the price per year."""
    return (purchase_price * LANDLORD_INSURANCE_RATE) / 12


def estimate_co_ownership_charges(purchase_price: float) -> float:
    """Monthly co-ownership charges, about 2% of the price per year."""
    return (purchase_price * CO_OWNERSHIP_RATE) / 12


def calculate_self_financing(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
) -> SelfFinancingResult:
    """
    Calculate the monthly self-financing position.

    Args:
        property_asset: Property being let
        loan: Financing, with its monthly payment already derived
        rental: Letting assumptions

    Returns:
        SelfFinancingResult. The ratio is inf when there is no outflow.
    """
    # === INFLOWS ===
    adjusted_rent = rental.monthly_rent * rental.occupancy_rate
    total_inflow = adjusted_rent + rental.recoverable_charges

    # === OUTFLOWS ===
    loan_payment = loan.monthly_payment
    borrower_insurance = calculate_monthly_insurance(loan)

    price = property_asset.purchase_price
    property_tax = estimate_property_tax(price)
    landlord_insurance = estimate_landlord_insurance(price)
    co_ownership = estimate_co_ownership_charges(price)

    management_fee = adjusted_rent * rental.management_fee_rate

    vacancy_provision = rental.monthly_rent * VACANCY_PROVISION_RATE
    renovation_provision = rental.monthly_rent * RENOVATION_PROVISION_RATE

    total_outflow = (
        loan_payment
        + borrower_insurance
        + property_tax
        + landlord_insurance
        + co_ownership
        + management_fee
        + vacancy_provision
        + renovation_provision
    )

    monthly_cash_flow = total_inflow - total_outflow

    if total_outflow == 0:
        logger.debug("No outflow to cover, self-financing ratio is unbounded")
    ratio = calculate_ratio(total_inflow, total_outflow)

    return SelfFinancingResult(
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=monthly_cash_flow * 12,
        self_financing_ratio=ratio,
        inflows=InflowBreakdown(
            adjusted_rent=adjusted_rent,
            recoverable_charges=rental.recoverable_charges,
            total=total_inflow,
        ),
        outflows=OutflowBreakdown(
            loan_payment=loan_payment,
            borrower_insurance=borrower_insurance,
            property_tax=property_tax,
            landlord_insurance=landlord_insurance,
            co_ownership_charges=co_ownership,
            management_fee=management_fee,
            vacancy_provision=vacancy_provision,
            renovation_provision=renovation_provision,
            total=total_outflow,
        ),
    )
