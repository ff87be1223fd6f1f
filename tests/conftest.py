"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from rental_model.main import app
from rental_model.calculations.amortization import build_loan
from rental_model.calculations.models import (
    PropertyAsset,
    RentalData,
    TaxProfile,
    TaxRegime,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def property_asset():
    """200k flat, 15k notary fee, no renovation."""
    return PropertyAsset(
        purchase_price=200000,
        renovation_cost=0,
        notary_fee=15000,
        land_value_fraction=0.10,
    )


@pytest.fixture
def loan():
    """Whole acquisition cost borrowed at 3% over 20 years."""
    return build_loan(principal=215000, annual_rate=0.03, years=20)


@pytest.fixture
def rental():
    """1200/month let 95% of the time with an 8% management fee."""
    return RentalData(
        monthly_rent=1200,
        recoverable_charges=0,
        occupancy_rate=0.95,
        management_fee_rate=0.08,
    )


@pytest.fixture
def lmnp_profile():
    return TaxProfile(regime=TaxRegime.lmnp, income_tax_rate=0.30, social_levy_rate=0.17)


@pytest.fixture
def scenario_payload():
    """The reference scenario as an API request body."""
    return {
        "property": {
            "purchase_price": 200000,
            "renovation_cost": 0,
            "notary_fee": 15000,
            "land_value_fraction": 0.10,
        },
        "loan": {
            "down_payment": 0,
            "annual_rate": 0.03,
            "years": 20,
        },
        "rental": {
            "monthly_rent": 1200,
            "recoverable_charges": 0,
            "occupancy_rate": 0.95,
            "management_fee_rate": 0.08,
        },
        "tax": {
            "regime": "lmnp",
            "income_tax_rate": 0.30,
            "social_levy_rate": 0.17,
        },
        "holding_years": 15,
        "appreciation_rate": 0.02,
    }
