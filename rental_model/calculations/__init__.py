"""
Financial Calculation Engine

Pure calculation modules for rental investment analysis: amortization,
self-financing, taxation, resale and returns. Every function takes immutable
input records and returns a fresh result.
"""

from rental_model.calculations import (
    amortization,
    self_financing,
    taxation,
    resale,
    irr,
    returns,
)

__all__ = ["amortization", "self_financing", "taxation", "resale", "irr", "returns"]
