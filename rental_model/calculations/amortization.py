"""
Loan Amortization Calculations

Implements the fixed-rate annuity payment, the monthly amortization schedule
and the closed-form remaining balance of a mortgage.
"""

from typing import List, Dict, Optional
from dataclasses import replace
from datetime import date
from dateutil.relativedelta import relativedelta

from rental_model.calculations.models import Loan, PropertyAsset


def calculate_payment(principal: float, annual_rate: float, years: int) -> float:
    """
    Calculate the fixed monthly payment of a loan.

    Args:
        principal: Borrowed amount
        annual_rate: Annual nominal rate as decimal (e.g., 0.03 for 3%)
        years: Loan term in years

    Returns:
        Monthly payment, or 0 for a degenerate loan (no rate, no term or
        nothing borrowed)
    """
    if principal <= 0 or annual_rate == 0 or years <= 0:
        return 0.0

    monthly_rate = annual_rate / 12
    months = years * 12

    payment = (
        principal
        * monthly_rate
        * ((1 + monthly_rate) ** months)
        / (((1 + monthly_rate) ** months) - 1)
    )

    return payment


def build_loan(
    principal: float,
    annual_rate: float,
    years: int,
    origination_fee: float = 0.0,
    insurance_rate: float = 0.0,
) -> Loan:
    """Create a Loan whose monthly payment is derived from its terms."""
    return Loan(
        principal=principal,
        annual_rate=annual_rate,
        years=years,
        origination_fee=origination_fee,
        insurance_rate=insurance_rate,
    )


def update_loan_terms(loan: Loan, **changes) -> Loan:
    """Return a copy of the loan with changed fields; the payment is rederived."""
    return replace(loan, **changes)


def calculate_borrowed_amount(property_asset: PropertyAsset, down_payment: float) -> float:
    """Amount to borrow once the down payment covers part of the acquisition."""
    return max(0.0, property_asset.acquisition_cost - down_payment)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    years: int,
    payment: float,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate the monthly amortization schedule.

    Args:
        principal: Borrowed amount
        annual_rate: Annual rate as decimal
        years: Loan term in years
        payment: Monthly payment applied every period
        start_date: Date of the first payment; rows carry a date when given

    Returns:
        One row per month (years * 12 rows); empty for a degenerate loan
    """
    if principal <= 0 or annual_rate <= 0 or years <= 0:
        return []

    schedule = []
    balance = principal
    monthly_rate = annual_rate / 12

    for period in range(1, years * 12 + 1):
        interest = balance * monthly_rate
        principal_paid = payment - interest
        balance -= principal_paid

        row = {
            "period": period,
            "remaining_principal": max(0.0, balance),
            "interest": interest,
            "principal_paid": principal_paid,
            "payment": payment,
        }
        if start_date is not None:
            row["date"] = (start_date + relativedelta(months=period - 1)).isoformat()

        schedule.append(row)

    return schedule


def loan_schedule(loan: Loan, start_date: Optional[date] = None) -> List[Dict]:
    """Amortization schedule of a Loan record."""
    return generate_amortization_schedule(
        loan.principal, loan.annual_rate, loan.years, loan.monthly_payment, start_date
    )


def calculate_remaining_balance(loan: Loan, years_elapsed: float) -> float:
    """
    Calculate the outstanding balance after a number of years.

    Uses the closed-form declining balance after
    k = min(years_elapsed * 12, n) payments, floored at 0.
    """
    months = loan.years * 12
    if months <= 0:
        return 0.0

    months_elapsed = min(years_elapsed * 12, months)
    monthly_rate = loan.annual_rate / 12

    if monthly_rate == 0:
        return max(0.0, loan.principal * (1 - months_elapsed / months))

    balance = (
        loan.principal
        * (1 - (1 + monthly_rate) ** (months_elapsed - months))
        / (1 - (1 + monthly_rate) ** (-months))
    )

    return max(0.0, balance)


def calculate_first_year_interest(loan: Loan) -> float:
    """
    Interest paid over the first 12 payments.

    Steps through the same recurrence as generate_amortization_schedule so
    the result matches the sum of its first 12 rows exactly.
    """
    monthly_rate = loan.annual_rate / 12
    balance = loan.principal
    total_interest = 0.0

    for _ in range(12):
        interest = balance * monthly_rate
        total_interest += interest
        balance -= loan.monthly_payment - interest

    return total_interest


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row["interest"] for row in schedule)


def calculate_interest_paid(schedule: List[Dict], months: int) -> float:
    """Interest paid over the first N months of the schedule."""
    return sum(row["interest"] for row in schedule if row["period"] <= months)


def calculate_principal_repaid(schedule: List[Dict], months: int) -> float:
    """Principal repaid over the first N months of the schedule."""
    return sum(row["principal_paid"] for row in schedule if row["period"] <= months)


def calculate_monthly_insurance(loan: Loan) -> float:
    """Monthly borrower insurance premium."""
    return loan.principal * loan.insurance_rate / 12


def calculate_total_cost(loan: Loan) -> float:
    """Total cost of credit: interest, insurance and origination fee."""
    total_interest = calculate_total_interest(loan_schedule(loan))
    total_insurance = calculate_monthly_insurance(loan) * loan.years * 12
    return total_interest + total_insurance + loan.origination_fee
