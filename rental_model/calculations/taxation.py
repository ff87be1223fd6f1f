"""
Rental Income Taxation

Taxable income, depreciation and tax due under the three supported regimes:

1. LMNP - real charges deducted and straight-line depreciation
2. LMP - real charges deducted, no depreciation, deficits left to other income
3. Bare ownership - no rental income while ownership is split
"""

from typing import List, Dict

from rental_model.calculations.models import (
    PropertyAsset,
    Loan,
    RentalData,
    TaxProfile,
    TaxRegime,
    TaxResult,
    SelfFinancingResult,
)
from rental_model.calculations.amortization import calculate_first_year_interest
from rental_model.calculations.self_financing import calculate_self_financing

# Depreciation horizons in years
BUILDING_DEPRECIATION_YEARS = 30
RENOVATION_DEPRECIATION_YEARS = 10
FURNITURE_DEPRECIATION_YEARS = 5

FURNITURE_SHARE_OF_PRICE = 0.10

DEFAULT_HOLDING_YEARS = 15


def build_depreciation_schedule(
    property_asset: PropertyAsset, holding_years: int
) -> List[Dict]:
    """
    Build the straight-line depreciation table for years 1..holding_years.

    Each category contributes its annual amount only while the year is within
    its own horizon (30 years building, 10 renovation, 5 furniture).
    """
    building_value = property_asset.purchase_price * (1 - property_asset.land_value_fraction)
    annual_building = building_value / BUILDING_DEPRECIATION_YEARS
    annual_renovation = property_asset.renovation_cost / RENOVATION_DEPRECIATION_YEARS
    furniture_value = property_asset.purchase_price * FURNITURE_SHARE_OF_PRICE
    annual_furniture = furniture_value / FURNITURE_DEPRECIATION_YEARS

    schedule = []
    for year in range(1, holding_years + 1):
        building = annual_building if year <= BUILDING_DEPRECIATION_YEARS else 0.0
        renovation = annual_renovation if year <= RENOVATION_DEPRECIATION_YEARS else 0.0
        furniture = annual_furniture if year <= FURNITURE_DEPRECIATION_YEARS else 0.0

        schedule.append(
            {
                "year": year,
                "building_depreciation": building,
                "renovation_depreciation": renovation,
                "furniture_depreciation": furniture,
                "total_depreciation": building + renovation + furniture,
            }
        )

    return schedule


def first_year_depreciation(property_asset: PropertyAsset) -> float:
    """Sum of the three annual depreciation amounts."""
    return (
        property_asset.purchase_price
        * (1 - property_asset.land_value_fraction)
        / BUILDING_DEPRECIATION_YEARS
        + property_asset.renovation_cost / RENOVATION_DEPRECIATION_YEARS
        + property_asset.purchase_price
        * FURNITURE_SHARE_OF_PRICE
        / FURNITURE_DEPRECIATION_YEARS
    )


def calculate_deductible_charges(self_financing: SelfFinancingResult, loan: Loan) -> float:
    """Annual deductible charges: recurring charges plus first-year interest."""
    outflows = self_financing.outflows
    annual_charges = (
        outflows.property_tax
        + outflows.landlord_insurance
        + outflows.co_ownership_charges
        + outflows.management_fee
    ) * 12
    return annual_charges + calculate_first_year_interest(loan)


def calculate_taxation(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
    tax_profile: TaxProfile,
    holding_years: int = DEFAULT_HOLDING_YEARS,
) -> TaxResult:
    """
    Calculate the annual tax position for the chosen regime.

    Args:
        property_asset: Property being let
        loan: Financing, with its monthly payment already derived
        rental: Letting assumptions
        tax_profile: Regime and marginal rates
        holding_years: Length of the depreciation table

    Returns:
        TaxResult
    """
    self_financing = calculate_self_financing(property_asset, loan, rental)
    annual_rent = self_financing.inflows.adjusted_rent * 12
    combined_rate = tax_profile.income_tax_rate + tax_profile.social_levy_rate

    deductible_charges = 0.0
    depreciation = 0.0
    taxable_income = 0.0
    tax_due = 0.0
    schedule: List[Dict] = []

    if tax_profile.regime == TaxRegime.lmnp:
        deductible_charges = calculate_deductible_charges(self_financing, loan)
        depreciation = first_year_depreciation(property_asset)
        schedule = build_depreciation_schedule(property_asset, holding_years)

        taxable_income = max(0.0, annual_rent - deductible_charges - depreciation)
        tax_due = taxable_income * combined_rate

    elif tax_profile.regime == TaxRegime.lmp:
        deductible_charges = calculate_deductible_charges(self_financing, loan)

        # A deficit is not taxed and not carried forward
        taxable_income = annual_rent - deductible_charges
        tax_due = taxable_income * combined_rate if taxable_income > 0 else 0.0

    elif tax_profile.regime == TaxRegime.bare_ownership:
        taxable_income = 0.0
        tax_due = 0.0

    net_result_after_tax = annual_rent - deductible_charges - tax_due

    return TaxResult(
        taxable_income=taxable_income,
        deductible_charges=deductible_charges,
        depreciation=depreciation,
        tax_due=tax_due,
        net_result_after_tax=net_result_after_tax,
        depreciation_schedule=schedule,
    )
