"""
Tests for resale, yield and return calculations.
"""

import math

import pytest

from rental_model.calculations.amortization import build_loan, calculate_remaining_balance
from rental_model.calculations.models import PropertyAsset, RentalData, TaxProfile, TaxRegime
from rental_model.calculations.resale import (
    estimate_sale_price,
    calculate_income_tax_allowance,
    calculate_social_levy_allowance,
    calculate_resale,
    calculate_early_resale,
    project_resale,
)
from rental_model.calculations.returns import (
    calculate_yields,
    build_irr_cash_flows,
    calculate_project_irr,
    calculate_payback_period,
    calculate_cumulative_cash_flow,
    calculate_simplified_gain_tax,
    calculate_monthly_savings,
    analyze_investment,
)
from rental_model.calculations.taxation import calculate_taxation
from rental_model.calculations.irr import calculate_npv


class TestSalePrice:
    """Test compound appreciation."""

    @pytest.mark.parametrize("years", [0, 1, 10, 25])
    def test_zero_appreciation_is_noop(self, years):
        assert estimate_sale_price(100000, 0, years) == 100000

    def test_compound_growth(self):
        assert estimate_sale_price(200000, 0.02, 15) == pytest.approx(269173.67, abs=0.01)


class TestAllowances:
    """Test holding-period allowances on capital gains."""

    def test_no_allowance_up_to_five_years(self):
        for years in range(0, 6):
            assert calculate_income_tax_allowance(years) == 0
            assert calculate_social_levy_allowance(years) == 0

    def test_income_tax_allowance_steps(self):
        assert calculate_income_tax_allowance(6) == pytest.approx(0.06)
        assert calculate_income_tax_allowance(15) == pytest.approx(0.60)
        assert calculate_income_tax_allowance(21) == pytest.approx(0.96)
        assert calculate_income_tax_allowance(22) == 1.0

    def test_social_levy_allowance_steps(self):
        assert calculate_social_levy_allowance(6) == pytest.approx(0.0165)
        assert calculate_social_levy_allowance(21) == pytest.approx(0.264)
        assert calculate_social_levy_allowance(22) == pytest.approx(0.313)
        assert calculate_social_levy_allowance(23) == pytest.approx(0.403)
        assert calculate_social_levy_allowance(29) == pytest.approx(0.943)
        assert calculate_social_levy_allowance(30) == 1.0

    def test_allowances_are_monotonic(self):
        previous_ir = previous_ps = 0.0
        for years in range(0, 41):
            ir = calculate_income_tax_allowance(years)
            ps = calculate_social_levy_allowance(years)
            assert ir >= previous_ir
            assert ps >= previous_ps
            previous_ir, previous_ps = ir, ps

    def test_allowances_saturate(self):
        for years in range(22, 41):
            assert calculate_income_tax_allowance(years) == 1.0
        for years in range(30, 41):
            assert calculate_social_levy_allowance(years) == 1.0


class TestResale:
    """Test capital gain and resale result."""

    def test_gain_against_acquisition_cost(self, property_asset, loan):
        result = calculate_resale(property_asset, loan, 300000, 3)
        assert result.gross_capital_gain == pytest.approx(85000)
        assert result.capital_gains_tax == pytest.approx(85000 * 0.36)
        assert result.net_capital_gain == pytest.approx(85000 * 0.64)
        assert result.global_return == pytest.approx(85000 * 0.64 / 215000)

    def test_gain_with_allowances(self, property_asset, loan):
        sale_price = estimate_sale_price(200000, 0.02, 15)
        result = calculate_resale(property_asset, loan, sale_price, 15)
        assert result.gross_capital_gain == pytest.approx(54173.67, abs=0.01)
        assert result.capital_gains_tax == pytest.approx(11807.15, abs=0.01)
        assert result.net_capital_gain == pytest.approx(42366.52, abs=0.01)

    def test_loss_is_not_taxed(self, property_asset, loan):
        result = calculate_resale(property_asset, loan, 180000, 10)
        assert result.gross_capital_gain == pytest.approx(-35000)
        assert result.capital_gains_tax == 0
        assert result.net_capital_gain == pytest.approx(-35000)

    def test_long_holding_is_exempt(self, property_asset, loan):
        result = calculate_resale(property_asset, loan, 400000, 31)
        assert result.capital_gains_tax == 0

    def test_income_tax_exempt_after_22_years(self, property_asset, loan):
        result = calculate_resale(property_asset, loan, 315000, 25)
        social_only = 100000 * (1 - calculate_social_levy_allowance(25)) * 0.17
        assert result.capital_gains_tax == pytest.approx(social_only)

    def test_early_resale(self, property_asset, loan):
        result = calculate_early_resale(property_asset, loan, 269173.67, 15)
        assert result.remaining_balance == pytest.approx(66359.03, abs=0.01)
        assert result.net_resale_result == pytest.approx(
            result.net_capital_gain - result.remaining_balance
        )


class TestResaleProjection:
    """Test the resale projection with its yearly path."""

    def test_projection(self, property_asset, loan):
        projection = project_resale(property_asset, loan, 15, 0.02)
        assert projection.sale_price == pytest.approx(269173.67, abs=0.01)
        assert projection.total_valuation == pytest.approx(69173.67, abs=0.01)
        assert projection.initial_investment == 215000
        assert projection.income_tax_allowance == pytest.approx(0.60)
        assert projection.social_levy_allowance == pytest.approx(0.165)
        assert projection.capital_gains_tax == pytest.approx(
            projection.income_tax + projection.social_levy
        )
        assert projection.remaining_balance == pytest.approx(66359.03, abs=0.01)
        assert projection.net_resale_result == pytest.approx(
            projection.net_capital_gain - projection.remaining_balance
        )

    def test_sale_costs_reduce_net_result(self, property_asset, loan):
        without = project_resale(property_asset, loan, 15, 0.02)
        with_costs = project_resale(property_asset, loan, 15, 0.02, sale_costs=5000)
        assert with_costs.gross_capital_gain == without.gross_capital_gain
        assert with_costs.net_resale_result == pytest.approx(without.net_resale_result - 5000)

    def test_loan_breakdown(self, property_asset, loan):
        projection = project_resale(property_asset, loan, 15, 0.02)
        assert projection.principal_repaid == pytest.approx(215000 - 66359.03, abs=0.01)
        assert projection.principal_repaid + projection.interest_paid == pytest.approx(
            loan.monthly_payment * 180
        )

    def test_yearly_projection(self, property_asset, loan):
        projection = project_resale(property_asset, loan, 10, 0.03)
        rows = projection.yearly_projection
        assert [row["year"] for row in rows] == list(range(0, 11))
        assert rows[0]["property_value"] == 200000
        assert rows[0]["remaining_balance"] == pytest.approx(215000)
        assert rows[0]["valuation"] == 0
        assert rows[10]["property_value"] == pytest.approx(projection.sale_price)
        assert rows[10]["remaining_balance"] == pytest.approx(calculate_remaining_balance(loan, 10))
        for row in rows:
            assert row["net_equity"] == pytest.approx(row["property_value"] - row["remaining_balance"])

    def test_annualized_return(self, property_asset, loan):
        projection = project_resale(property_asset, loan, 25, 0.03)
        assert (1 + projection.annualized_return) ** 25 == pytest.approx(1 + projection.total_return)

    def test_fractional_holding_period(self, property_asset, loan):
        """Yearly rows stop at the last whole year; the sale uses the exact horizon."""
        projection = project_resale(property_asset, loan, 7.5, 0.02)
        assert projection.holding_years == 7.5
        assert [row["year"] for row in projection.yearly_projection] == list(range(0, 8))
        assert projection.sale_price == pytest.approx(estimate_sale_price(200000, 0.02, 7.5))
        assert projection.remaining_balance == pytest.approx(calculate_remaining_balance(loan, 7.5))
        assert projection.principal_repaid + projection.interest_paid == pytest.approx(
            loan.monthly_payment * 90
        )


class TestYields:
    """Test yield and return indicators."""

    def test_reference_yields(self, property_asset, loan, rental, lmnp_profile):
        result = calculate_yields(property_asset, loan, rental, lmnp_profile)
        assert result.gross_yield == pytest.approx(13680 / 215000)

        charges = (2000 + 400 + 4000 + 1140 * 0.08 * 12 + 60 * 12 + 120 * 12)
        assert result.net_yield == pytest.approx((13680 - charges) / 215000)

        taxation = calculate_taxation(property_asset, loan, rental, lmnp_profile)
        assert result.net_of_tax_yield == pytest.approx(taxation.net_result_after_tax / 215000)

    def test_roi_uses_flat_gain_tax(self, property_asset, loan, rental, lmnp_profile):
        result = calculate_yields(property_asset, loan, rental, lmnp_profile, 0.02, 15)
        taxation = calculate_taxation(property_asset, loan, rental, lmnp_profile, 15)
        gain = estimate_sale_price(200000, 0.02, 15) - 200000
        total_gain = taxation.net_result_after_tax * 15 + gain * 0.8
        assert result.roi == pytest.approx((total_gain - 215000) / 215000)

    def test_negative_cash_flow_has_infinite_payback(self, property_asset, loan, rental, lmnp_profile):
        result = calculate_yields(property_asset, loan, rental, lmnp_profile)
        assert math.isinf(result.payback_years)

    def test_payback_period(self):
        assert calculate_payback_period(200000, 10000) == 20
        assert math.isinf(calculate_payback_period(200000, 0))
        assert math.isinf(calculate_payback_period(200000, -500))

    def test_payback_with_profitable_rent(self, property_asset, loan):
        rental = RentalData(monthly_rent=3000, occupancy_rate=1.0)
        profile = TaxProfile(regime=TaxRegime.bare_ownership)
        result = calculate_yields(property_asset, loan, rental, profile)
        assert result.payback_years == pytest.approx(215000 / 36000)

    def test_simplified_gain_tax(self):
        assert calculate_simplified_gain_tax(10000) == pytest.approx(2000)
        assert calculate_simplified_gain_tax(-10000) == 0

    def test_cumulative_cash_flow(self):
        assert calculate_cumulative_cash_flow(1200, 15) == 18000


class TestProjectIRR:
    """Test the investment cash-flow series and its IRR."""

    def test_cash_flow_series(self, property_asset, loan, rental, lmnp_profile):
        cash_flows = build_irr_cash_flows(property_asset, loan, rental, lmnp_profile, 0.02, 15)
        annual = calculate_taxation(property_asset, loan, rental, lmnp_profile, 15).net_result_after_tax
        sale_price = estimate_sale_price(200000, 0.02, 15)

        assert len(cash_flows) == 16
        assert cash_flows[0] == -215000
        assert cash_flows[1:15] == [annual] * 14
        assert cash_flows[15] == pytest.approx(annual + sale_price - (sale_price - 200000) * 0.2)

    def test_single_year_series(self, property_asset, loan, rental, lmnp_profile):
        cash_flows = build_irr_cash_flows(property_asset, loan, rental, lmnp_profile, 0.0, 1)
        assert len(cash_flows) == 2

    def test_project_irr_zeroes_npv(self, property_asset, loan, rental, lmnp_profile):
        rate = calculate_project_irr(property_asset, loan, rental, lmnp_profile)
        cash_flows = build_irr_cash_flows(property_asset, loan, rental, lmnp_profile)
        assert abs(calculate_npv(cash_flows, rate)) < 1e-4
        assert -1 < rate < 0.10

    def test_analysis_composes_calculators(self, property_asset, loan, rental, lmnp_profile):
        analysis = analyze_investment(property_asset, loan, rental, lmnp_profile)
        assert analysis.monthly_payment == loan.monthly_payment
        assert analysis.yields == calculate_yields(property_asset, loan, rental, lmnp_profile)
        assert analysis.irr == calculate_project_irr(property_asset, loan, rental, lmnp_profile)
        assert analysis.resale.holding_years == 15


class TestSavings:
    """Test the monthly saving needed for a down payment."""

    def test_zero_return(self):
        assert calculate_monthly_savings(12000, 1, 0.0) == pytest.approx(1000)

    def test_savings_with_return(self):
        monthly = calculate_monthly_savings(20000, 5, 0.02)
        assert monthly < 20000 / 60
        monthly_rate = 1.02 ** (1 / 12) - 1
        accumulated = sum(monthly * (1 + monthly_rate) ** (60 - m) for m in range(60))
        assert accumulated == pytest.approx(20000)
