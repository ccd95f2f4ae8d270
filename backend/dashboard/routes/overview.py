"""
Dashboard Aggregator — Overview Route
=======================================

What:  GET /api/overview — one card per configured backend.
       GET /api/me       — the identity the auth gate attached.

The overview always answers 200 once the caller is authenticated: backend
failures show up as {"error": "Failed to load"} inside `apps`.
"""

from fastapi import APIRouter, Depends

from dashboard.dependencies import get_aggregator, get_identity
from dashboard.schemas.responses import Identity, OverviewResponse, UnauthenticatedResponse
from dashboard.services.aggregator import OverviewAggregator

router = APIRouter(prefix="/api", tags=["Overview"])


@router.get(
    "/overview",
    response_model=OverviewResponse,
    responses={401: {"description": "Not authenticated", "model": UnauthenticatedResponse}},
    summary="Aggregated summary of every configured backend",
)
async def get_overview(
    aggregator: OverviewAggregator = Depends(get_aggregator),
) -> OverviewResponse:
    return OverviewResponse(**await aggregator.overview())


@router.get(
    "/me",
    response_model=Identity,
    responses={401: {"description": "Not authenticated", "model": UnauthenticatedResponse}},
    summary="Identity of the signed-in user",
)
async def get_me(identity: Identity = Depends(get_identity)) -> Identity:
    return identity
