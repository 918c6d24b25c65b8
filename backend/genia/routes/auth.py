"""Geni AI Auth Routes

Endpoints:
- POST /api/genia/auth/login - Log in (creates or rehydrates the device account)
- POST /api/genia/auth/logout - Drop the in-memory session
- GET /api/genia/auth/me - Get current session
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import logging

from genia.errors import GeniaError, NotLoggedIn
from genia.models.session import Session
from genia.routes import http_error
from genia.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/genia/auth", tags=["Geni AI Auth"])


class LoginRequest(BaseModel):
    email: str


def get_current_session() -> Session:
    """Dependency returning the live session."""
    try:
        return account_service.current()
    except NotLoggedIn as e:
        raise http_error(e)


@router.post("/login", response_model=Session)
async def login(data: LoginRequest):
    """Log in with any email-like string.

    New accounts start on the free plan with one credit.
    """
    try:
        return await account_service.login(data.email)
    except GeniaError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise HTTPException(status_code=500, detail="Login failed")


@router.post("/logout")
async def logout():
    try:
        account_service.logout()
    except GeniaError as e:
        raise http_error(e)
    return {"logged_out": True}


@router.get("/me", response_model=Session)
async def me(session: Session = Depends(get_current_session)):
    return session
