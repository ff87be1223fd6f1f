"""
Yield and Return Calculations

Gross, net and net-of-tax yields, ROI, payback period and IRR of a rental
investment, composed from the self-financing, taxation and resale modules.

The ROI and IRR use a flat 20% tax on the appreciation of the purchase price.
This is an approximation kept separate from the allowance-based tax of the
resale module; the two are not reconciled.
"""

from typing import List

from rental_model.calculations.models import (
    PropertyAsset,
    Loan,
    RentalData,
    TaxProfile,
    YieldResult,
    InvestmentAnalysis,
)
from rental_model.calculations.self_financing import calculate_self_financing
from rental_model.calculations.taxation import calculate_taxation
from rental_model.calculations.resale import estimate_sale_price, project_resale
from rental_model.calculations.ratios import calculate_ratio
from rental_model.calculations import irr

DEFAULT_APPRECIATION_RATE = 0.02
DEFAULT_HOLDING_YEARS = 15
SIMPLIFIED_GAIN_TAX_RATE = 0.20


def calculate_simplified_gain_tax(capital_gain: float) -> float:
    """Flat 20% tax on a positive gain, 0 otherwise."""
    return max(0.0, capital_gain * SIMPLIFIED_GAIN_TAX_RATE)


def calculate_cumulative_cash_flow(annual_cash_flow: float, holding_years: int) -> float:
    """Cash flow accumulated over the holding period."""
    return annual_cash_flow * holding_years


def calculate_payback_period(total_invested: float, annual_cash_flow: float) -> float:
    """Years of constant cash flow needed to recover the investment, inf if never."""
    if annual_cash_flow > 0:
        return total_invested / annual_cash_flow
    return float("inf")


def calculate_yields(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
    tax_profile: TaxProfile,
    appreciation_rate: float = DEFAULT_APPRECIATION_RATE,
    holding_years: int = DEFAULT_HOLDING_YEARS,
) -> YieldResult:
    """
    Calculate yield indicators.

    Args:
        property_asset: Property being let
        loan: Financing, with its monthly payment already derived
        rental: Letting assumptions
        tax_profile: Regime and marginal rates
        appreciation_rate: Annual appreciation of the property
        holding_years: Holding period in years

    Returns:
        YieldResult; payback_years is inf when the net cash flow is not positive
    """
    total_invested = property_asset.acquisition_cost

    self_financing = calculate_self_financing(property_asset, loan, rental)
    taxation = calculate_taxation(property_asset, loan, rental, tax_profile, holding_years)
    sale_price = estimate_sale_price(
        property_asset.purchase_price, appreciation_rate, holding_years
    )

    annual_rent = self_financing.inflows.adjusted_rent * 12
    annual_charges = self_financing.outflows.operating_charges * 12

    gross_yield = calculate_ratio(annual_rent, total_invested)
    net_yield = calculate_ratio(annual_rent - annual_charges, total_invested)
    net_of_tax_yield = calculate_ratio(taxation.net_result_after_tax, total_invested)

    cumulative_cash_flow = calculate_cumulative_cash_flow(
        taxation.net_result_after_tax, holding_years
    )
    capital_gain = sale_price - property_asset.purchase_price
    gain_tax = calculate_simplified_gain_tax(capital_gain)

    total_gain = cumulative_cash_flow + (capital_gain - gain_tax)
    roi = calculate_ratio(total_gain - total_invested, total_invested)

    return YieldResult(
        gross_yield=gross_yield,
        net_yield=net_yield,
        net_of_tax_yield=net_of_tax_yield,
        roi=roi,
        payback_years=calculate_payback_period(
            total_invested, taxation.net_result_after_tax
        ),
    )


def build_irr_cash_flows(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
    tax_profile: TaxProfile,
    appreciation_rate: float = DEFAULT_APPRECIATION_RATE,
    holding_years: int = DEFAULT_HOLDING_YEARS,
) -> List[float]:
    """
    Build the annual cash-flow series of the investment.

    [-invested, cf, ..., cf, cf + sale price - simplified gain tax], with one
    cash flow per holding year.
    """
    total_invested = property_asset.acquisition_cost

    taxation = calculate_taxation(property_asset, loan, rental, tax_profile, holding_years)
    annual_cash_flow = taxation.net_result_after_tax

    sale_price = estimate_sale_price(
        property_asset.purchase_price, appreciation_rate, holding_years
    )
    gain_tax = calculate_simplified_gain_tax(sale_price - property_asset.purchase_price)
    final_flow = sale_price - gain_tax

    cash_flows = [-total_invested]
    for _ in range(1, holding_years):
        cash_flows.append(annual_cash_flow)
    cash_flows.append(annual_cash_flow + final_flow)

    return cash_flows


def calculate_project_irr(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
    tax_profile: TaxProfile,
    appreciation_rate: float = DEFAULT_APPRECIATION_RATE,
    holding_years: int = DEFAULT_HOLDING_YEARS,
) -> float:
    """IRR of the investment over the holding period (approximate)."""
    cash_flows = build_irr_cash_flows(
        property_asset, loan, rental, tax_profile, appreciation_rate, holding_years
    )
    return irr.calculate_irr(cash_flows)


def calculate_monthly_savings(
    target_amount: float, savings_years: float, annual_return: float = 0.02
) -> float:
    """
    Monthly saving needed to build a down payment.

    Deposits are made at the start of each month and compound at the monthly
    equivalent of the annual return.
    """
    months = savings_years * 12
    if months <= 0:
        return float("inf") if target_amount > 0 else 0.0

    monthly_rate = (1 + annual_return) ** (1 / 12) - 1
    if monthly_rate == 0:
        return target_amount / months

    accumulation_factor = ((1 + monthly_rate) ** months - 1) / monthly_rate * (1 + monthly_rate)
    return target_amount / accumulation_factor


def analyze_investment(
    property_asset: PropertyAsset,
    loan: Loan,
    rental: RentalData,
    tax_profile: TaxProfile,
    appreciation_rate: float = DEFAULT_APPRECIATION_RATE,
    holding_years: int = DEFAULT_HOLDING_YEARS,
    sale_costs: float = 0.0,
) -> InvestmentAnalysis:
    """Run every calculator on one input snapshot."""
    cash_flows = build_irr_cash_flows(
        property_asset, loan, rental, tax_profile, appreciation_rate, holding_years
    )

    return InvestmentAnalysis(
        monthly_payment=loan.monthly_payment,
        self_financing=calculate_self_financing(property_asset, loan, rental),
        taxation=calculate_taxation(
            property_asset, loan, rental, tax_profile, holding_years
        ),
        resale=project_resale(
            property_asset, loan, holding_years, appreciation_rate, sale_costs
        ),
        yields=calculate_yields(
            property_asset, loan, rental, tax_profile, appreciation_rate, holding_years
        ),
        irr_cash_flows=cash_flows,
        irr=irr.calculate_irr(cash_flows),
    )
