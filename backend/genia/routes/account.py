"""Geni AI Account Routes

Endpoints:
- GET /api/genia/account/stats - Credits, usage counters and recent activity
"""

from fastapi import APIRouter, Depends

from genia.errors import GeniaError
from genia.models.session import AccountStats
from genia.routes import http_error
from genia.routes.auth import get_current_session
from genia.services.account_service import account_service

router = APIRouter(prefix="/api/genia/account", tags=["Geni AI Account"])


@router.get("/stats", response_model=AccountStats, dependencies=[Depends(get_current_session)])
async def get_stats():
    try:
        return account_service.stats()
    except GeniaError as e:
        raise http_error(e)
