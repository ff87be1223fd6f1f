"""
API routes for the rental model.
"""

from fastapi import APIRouter

from rental_model.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
