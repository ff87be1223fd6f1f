"""
Input and Result Records

Immutable value records shared by every calculator. Calculators never
mutate these; each call returns a fresh result built from an input snapshot.

All monetary values are in a single currency unit. All rates are decimals
(0.05 for 5%), never percentages.
"""

from typing import List, Dict
from dataclasses import dataclass, field
import enum


class TaxRegime(str, enum.Enum):
    """Tax regime applied to the rental income."""

    lmnp = "lmnp"  # Furnished non-professional, depreciation allowed
    lmp = "lmp"  # Furnished professional, no depreciation, deficits offsettable
    bare_ownership = "bare_ownership"  # No rental income while split


@dataclass(frozen=True)
class PropertyAsset:
    """The property being acquired."""

    purchase_price: float  # Price including agency fee
    agency_fee: float = 0.0
    renovation_cost: float = 0.0
    notary_fee: float = 0.0
    land_value_fraction: float = 0.10  # Non-depreciable share of the price

    @property
    def acquisition_cost(self) -> float:
        """Price plus renovation and notary fee."""
        return self.purchase_price + self.renovation_cost + self.notary_fee


@dataclass(frozen=True)
class Loan:
    """
    Mortgage financing the acquisition.

    monthly_payment is derived from principal, annual_rate and years on every
    construction, including dataclasses.replace, and cannot be passed in.
    """

    principal: float
    annual_rate: float
    years: int
    monthly_payment: float = field(init=False)
    origination_fee: float = 0.0
    insurance_rate: float = 0.0  # Annual borrower insurance rate on principal

    def __post_init__(self):
        from rental_model.calculations.amortization import calculate_payment

        object.__setattr__(
            self,
            "monthly_payment",
            calculate_payment(self.principal, self.annual_rate, self.years),
        )


@dataclass(frozen=True)
class RentalData:
    """Letting assumptions."""

    monthly_rent: float  # Rent before charges
    recoverable_charges: float = 0.0
    occupancy_rate: float = 0.95
    management_fee_rate: float = 0.08  # Share of the collected rent


@dataclass(frozen=True)
class TaxProfile:
    """Investor tax situation."""

    regime: TaxRegime = TaxRegime.lmnp
    income_tax_rate: float = 0.30
    social_levy_rate: float = 0.17


@dataclass(frozen=True)
class InflowBreakdown:
    adjusted_rent: float
    recoverable_charges: float
    total: float


@dataclass(frozen=True)
class OutflowBreakdown:
    loan_payment: float
    borrower_insurance: float
    property_tax: float
    landlord_insurance: float
    co_ownership_charges: float
    management_fee: float
    vacancy_provision: float
    renovation_provision: float
    total: float

    @property
    def operating_charges(self) -> float:
        """Recurring charges excluding loan payment and borrower insurance."""
        return (
            self.property_tax
            + self.landlord_insurance
            + self.co_ownership_charges
            + self.management_fee
            + self.vacancy_provision
            + self.renovation_provision
        )


@dataclass(frozen=True)
class SelfFinancingResult:
    """Monthly cash balance of the operation."""

    total_inflow: float
    total_outflow: float
    monthly_cash_flow: float
    annual_cash_flow: float
    self_financing_ratio: float  # inf when there is no outflow
    inflows: InflowBreakdown
    outflows: OutflowBreakdown


@dataclass(frozen=True)
class TaxResult:
    """
    Annual tax position.

    Under the LMP regime a negative taxable_income is reported as-is with a
    zero tax: the deficit is assumed absorbed by other income and is not
    carried forward.
    """

    taxable_income: float
    deductible_charges: float
    depreciation: float  # First-year depreciation total
    tax_due: float
    net_result_after_tax: float
    depreciation_schedule: List[Dict] = field(default_factory=list)


@dataclass(frozen=True)
class ResaleResult:
    sale_price: float
    gross_capital_gain: float
    capital_gains_tax: float
    net_capital_gain: float
    global_return: float


@dataclass(frozen=True)
class EarlyResaleResult:
    net_capital_gain: float
    remaining_balance: float
    net_resale_result: float


@dataclass(frozen=True)
class ResaleProjection:
    """Resale at the end of the holding period, with the year-by-year path."""

    holding_years: float
    appreciation_rate: float
    sale_price: float
    total_valuation: float  # Sale price minus purchase price
    sale_costs: float
    initial_investment: float
    gross_capital_gain: float
    income_tax_allowance: float
    social_levy_allowance: float
    income_tax: float
    social_levy: float
    capital_gains_tax: float
    net_capital_gain: float
    global_return: float
    remaining_balance: float
    principal_repaid: float
    interest_paid: float
    net_resale_result: float
    total_return: float
    annualized_return: float
    yearly_projection: List[Dict] = field(default_factory=list)


@dataclass(frozen=True)
class YieldResult:
    gross_yield: float
    net_yield: float
    net_of_tax_yield: float
    roi: float
    payback_years: float  # inf when the annual net cash flow is not positive


@dataclass(frozen=True)
class InvestmentAnalysis:
    """Every indicator computed from one input snapshot."""

    monthly_payment: float
    self_financing: SelfFinancingResult
    taxation: TaxResult
    resale: ResaleProjection
    yields: YieldResult
    irr_cash_flows: List[float]
    irr: float
