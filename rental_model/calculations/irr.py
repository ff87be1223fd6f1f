"""
IRR and NPV Calculations

Implements IRR using the Newton-Raphson method over annual cash flows.
The solver never raises: it returns its current estimate when it runs out of
iterations or when the NPV derivative collapses, so callers must treat the
rate as an approximation.
"""

from typing import List
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
PRECISION = 1e-4  # Tolerance on |NPV|
DERIVATIVE_FLOOR = 1e-10
DEFAULT_GUESS = 0.1


@dataclass(frozen=True)
class IRRSolution:
    """Newton-Raphson outcome with its diagnostics."""

    rate: float
    npv: float
    iterations: int
    converged: bool


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / ((1 + discount_rate) ** period)
    return npv


def _npv_derivative(cash_flows: List[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    dnpv = 0.0
    for period, cf in enumerate(cash_flows):
        if period == 0:
            continue
        dnpv -= (period * cf) / ((1 + rate) ** (period + 1))
    return dnpv


def solve_irr(
    cash_flows: List[float],
    guess: float = DEFAULT_GUESS,
    precision: float = PRECISION,
    max_iterations: int = MAX_ITERATIONS,
) -> IRRSolution:
    """
    Solve NPV(rate) = 0 by Newton-Raphson.

    Stops when |NPV| < precision, after max_iterations, or early when
    |NPV'| < 1e-10 or the rate reaches a point where NPV is not defined.
    """
    rate = guess
    iterations = 0

    try:
        npv = calculate_npv(cash_flows, rate)
        while abs(npv) > precision and iterations < max_iterations:
            dnpv = _npv_derivative(cash_flows, rate)
            if abs(dnpv) < DERIVATIVE_FLOOR:
                logger.debug("IRR derivative collapsed at rate %s", rate)
                break

            rate = rate - npv / dnpv
            npv = calculate_npv(cash_flows, rate)
            iterations += 1
    except (ZeroDivisionError, OverflowError):
        logger.debug("IRR iteration left the domain of NPV at rate %s", rate)
        npv = float("nan")

    converged = abs(npv) <= precision
    if not converged:
        logger.debug(
            "IRR did not converge after %d iterations (rate=%s, npv=%s)",
            iterations,
            rate,
            npv,
        )

    return IRRSolution(rate=rate, npv=npv, iterations=iterations, converged=converged)


def calculate_irr(
    cash_flows: List[float],
    guess: float = DEFAULT_GUESS,
    precision: float = PRECISION,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Args:
        cash_flows: Array of annual cash flows, investment first
        guess: Initial guess for rate (default 0.1 = 10%)
        precision: Tolerance on |NPV|
        max_iterations: Iteration ceiling

    Returns:
        Annual IRR as decimal (e.g., 0.15 for 15%), possibly unconverged
    """
    return solve_irr(cash_flows, guess, precision, max_iterations).rate
