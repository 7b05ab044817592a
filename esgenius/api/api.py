"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from esgenius.api.endpoints import auth, esg_data, reports, taxonomy

api_router = APIRouter()

# Auth (login, refresh, registration, user management)
api_router.include_router(auth.router)

# ESG score records
api_router.include_router(esg_data.router)

# Custom taxonomy tree
api_router.include_router(taxonomy.router)

# Reports, health, integrations, compliance
api_router.include_router(reports.router)
