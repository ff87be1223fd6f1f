"""
Resale Calculations

Sale price under compound appreciation, capital-gains tax with the French
holding-period allowances, and the net result of the operation once the
outstanding loan is repaid.

Allowance schedule:
- Income tax (19%): 6% per year from year 6 to 21, full exemption from year 22
- Social levies (17%): 1.65% per year from year 6 to 21, 1.6% in year 22,
  9% per year from year 23, full exemption after year 30
"""

from rental_model.calculations.models import (
    PropertyAsset,
    Loan,
    ResaleResult,
    EarlyResaleResult,
    ResaleProjection,
)
from rental_model.calculations.amortization import (
    calculate_remaining_balance,
    calculate_principal_repaid,
    calculate_interest_paid,
    loan_schedule,
)
from rental_model.calculations.ratios import calculate_ratio

CAPITAL_GAINS_INCOME_TAX_RATE = 0.19
CAPITAL_GAINS_SOCIAL_LEVY_RATE = 0.17

ALLOWANCE_START_YEAR = 5  # No allowance up to and including this year
INCOME_TAX_ALLOWANCE_PER_YEAR = 0.06
SOCIAL_LEVY_ALLOWANCE_PER_YEAR = 0.0165
SOCIAL_LEVY_ALLOWANCE_CAP = 0.297
SOCIAL_LEVY_ALLOWANCE_YEAR_22 = 0.016
SOCIAL_LEVY_ALLOWANCE_LATE_PER_YEAR = 0.09


def estimate_sale_price(
    purchase_price: float, appreciation_rate: float, holding_years: float
) -> float:
    """Sale price after compound annual appreciation."""
    return purchase_price * (1 + appreciation_rate) ** holding_years


def calculate_income_tax_allowance(holding_years: float) -> float:
    """Share of the gain exempt from income tax after N years of ownership."""
    if holding_years <= ALLOWANCE_START_YEAR:
        return 0.0
    if holding_years <= 21:
        return min(1.0, INCOME_TAX_ALLOWANCE_PER_YEAR * (holding_years - ALLOWANCE_START_YEAR))
    # 96% after year 21, the last 4% in year 22
    return 1.0


def calculate_social_levy_allowance(holding_years: float) -> float:
    """Share of the gain exempt from social levies after N years of ownership."""
    if holding_years <= ALLOWANCE_START_YEAR:
        return 0.0
    if holding_years <= 21:
        return min(
            SOCIAL_LEVY_ALLOWANCE_CAP,
            SOCIAL_LEVY_ALLOWANCE_PER_YEAR * (holding_years - ALLOWANCE_START_YEAR),
        )
    year_22_allowance = SOCIAL_LEVY_ALLOWANCE_CAP + SOCIAL_LEVY_ALLOWANCE_YEAR_22
    if holding_years <= 22:
        return year_22_allowance
    if holding_years <= 30:
        return min(
            1.0,
            year_22_allowance + SOCIAL_LEVY_ALLOWANCE_LATE_PER_YEAR * (holding_years - 22),
        )
    return 1.0


def _capital_gains_tax(gross_gain: float, holding_years: float) -> tuple:
    """Return (income tax, social levies) due on a gross gain."""
    income_tax_base = max(0.0, gross_gain * (1 - calculate_income_tax_allowance(holding_years)))
    social_levy_base = max(0.0, gross_gain * (1 - calculate_social_levy_allowance(holding_years)))
    return (
        income_tax_base * CAPITAL_GAINS_INCOME_TAX_RATE,
        social_levy_base * CAPITAL_GAINS_SOCIAL_LEVY_RATE,
    )


def calculate_resale(
    property_asset: PropertyAsset,
    loan: Loan,
    sale_price: float,
    holding_years: float,
) -> ResaleResult:
    """
    Calculate the capital gain and its tax for a sale at a given price.

    Args:
        property_asset: Property sold
        loan: Financing (unused by the gain itself, kept for a uniform signature)
        sale_price: Expected sale price
        holding_years: Years of ownership at the sale

    Returns:
        ResaleResult; global_return is the net gain over the acquisition cost
    """
    acquisition_cost = property_asset.acquisition_cost
    gross_gain = sale_price - acquisition_cost

    income_tax, social_levy = _capital_gains_tax(gross_gain, holding_years)
    gains_tax = income_tax + social_levy
    net_gain = gross_gain - gains_tax

    return ResaleResult(
        sale_price=sale_price,
        gross_capital_gain=gross_gain,
        capital_gains_tax=gains_tax,
        net_capital_gain=net_gain,
        global_return=calculate_ratio(net_gain, acquisition_cost),
    )


def calculate_early_resale(
    property_asset: PropertyAsset,
    loan: Loan,
    sale_price: float,
    holding_years: float,
) -> EarlyResaleResult:
    """Net result of a sale once the outstanding loan balance is repaid."""
    resale = calculate_resale(property_asset, loan, sale_price, holding_years)
    remaining_balance = calculate_remaining_balance(loan, holding_years)

    return EarlyResaleResult(
        net_capital_gain=resale.net_capital_gain,
        remaining_balance=remaining_balance,
        net_resale_result=resale.net_capital_gain - remaining_balance,
    )


def project_resale(
    property_asset: PropertyAsset,
    loan: Loan,
    holding_years: float,
    appreciation_rate: float = 0.02,
    sale_costs: float = 0.0,
) -> ResaleProjection:
    """
    Project a resale at the end of the holding period.

    The sale price grows from the purchase price alone, while the gain is
    measured against the full acquisition cost. Sale costs reduce the net
    resale result, not the taxable gain.

    Args:
        property_asset: Property sold
        loan: Financing, with its monthly payment already derived
        holding_years: Years of ownership at the sale
        appreciation_rate: Annual appreciation as decimal
        sale_costs: Costs paid by the seller at the sale

    Returns:
        ResaleProjection including a row per whole year 0..holding_years;
        a fractional horizon still prices the sale at its exact length
    """
    purchase_price = property_asset.purchase_price
    initial_investment = property_asset.acquisition_cost

    sale_price = estimate_sale_price(purchase_price, appreciation_rate, holding_years)
    gross_gain = sale_price - initial_investment

    income_tax_allowance = calculate_income_tax_allowance(holding_years)
    social_levy_allowance = calculate_social_levy_allowance(holding_years)
    income_tax, social_levy = _capital_gains_tax(gross_gain, holding_years)
    gains_tax = income_tax + social_levy
    net_gain = gross_gain - gains_tax

    remaining_balance = calculate_remaining_balance(loan, holding_years)
    months_held = min(holding_years * 12, loan.years * 12)
    schedule = loan_schedule(loan)

    net_resale_result = net_gain - remaining_balance - sale_costs
    total_return = calculate_ratio(net_resale_result, initial_investment)

    if holding_years > 0 and total_return > -1:
        annualized_return = (1 + total_return) ** (1 / holding_years) - 1
    else:
        annualized_return = total_return

    yearly_projection = []
    for year in range(0, int(holding_years) + 1):
        property_value = estimate_sale_price(purchase_price, appreciation_rate, year)
        balance = calculate_remaining_balance(loan, year)
        yearly_projection.append(
            {
                "year": year,
                "property_value": property_value,
                "remaining_balance": balance,
                "valuation": property_value - purchase_price,
                "net_equity": property_value - balance,
            }
        )

    return ResaleProjection(
        holding_years=holding_years,
        appreciation_rate=appreciation_rate,
        sale_price=sale_price,
        total_valuation=sale_price - purchase_price,
        sale_costs=sale_costs,
        initial_investment=initial_investment,
        gross_capital_gain=gross_gain,
        income_tax_allowance=income_tax_allowance,
        social_levy_allowance=social_levy_allowance,
        income_tax=income_tax,
        social_levy=social_levy,
        capital_gains_tax=gains_tax,
        net_capital_gain=net_gain,
        global_return=calculate_ratio(net_gain, initial_investment),
        remaining_balance=remaining_balance,
        principal_repaid=calculate_principal_repaid(schedule, months_held),
        interest_paid=calculate_interest_paid(schedule, months_held),
        net_resale_result=net_resale_result,
        total_return=total_return,
        annualized_return=annualized_return,
        yearly_projection=yearly_projection,
    )
