"""Geni AI Licensing Routes

Endpoints:
- GET /api/genia/licensing/transaction - Transaction id and code request link
- POST /api/genia/licensing/activate - Redeem a 4-digit activation code
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
import logging

from genia import config
from genia.errors import GeniaError
from genia.models.session import Plan, Session
from genia.routes import http_error
from genia.routes.auth import get_current_session
from genia.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/genia/licensing", tags=["Geni AI Licensing"])


class TransactionResponse(BaseModel):
    transaction_id: str
    request_url: str
    credits: int = config.ACTIVATION_CREDITS


class ActivateRequest(BaseModel):
    code: str = Field(max_length=8)


class ActivateResponse(BaseModel):
    plan: Plan
    quota: int
    purchase_index: int
    credits_added: int


@router.get("/transaction", response_model=TransactionResponse, dependencies=[Depends(get_current_session)])
async def get_transaction():
    """Transaction id to quote when requesting a code out of band.

    Changes every hour and after every activation.
    """
    try:
        return TransactionResponse(
            transaction_id=account_service.transaction_id(),
            request_url=account_service.activation_request_url(),
        )
    except GeniaError as e:
        raise http_error(e)


@router.post("/activate", response_model=ActivateResponse)
async def activate(data: ActivateRequest, session: Session = Depends(get_current_session)):
    try:
        entry = await account_service.activate(data.code)
        return ActivateResponse(
            plan=session.plan,
            quota=session.quota,
            purchase_index=session.purchase_index,
            credits_added=entry.amount,
        )
    except GeniaError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Activation failed: {e}")
        raise HTTPException(status_code=500, detail="Activation failed")
