"""Geni AI Account Service

Owns the single live session of this device:
- Login (any string containing '@') rehydrates the stored account for that
  email, or creates a new one that replaces it on this device
- Logout drops the in-memory session; the stored copy stays
- Login and logout are refused while a generation is in flight
- Activation and generation mutate the session, then mirror it to the store
"""

from datetime import datetime
from typing import Optional
import logging

from genia import config
from genia.errors import InvalidEmail, NotLoggedIn, PipelineBusy
from genia.models.generation import GenerationRequest, GenerationResult
from genia.models.session import AccountStats, LedgerEntry, Plan, Session
from genia.services.ledger import license_ledger
from genia.services.pipeline import generation_pipeline
from genia.services.session_store import session_store
from genia.services import security_formula

logger = logging.getLogger(__name__)


class AccountService:
    """Device session management."""

    def __init__(self, store=None, ledger=None, pipeline=None):
        self.store = store or session_store
        self.ledger = ledger or license_ledger
        self.pipeline = pipeline or generation_pipeline
        self.session: Optional[Session] = None

    async def restore(self) -> Optional[Session]:
        """Rehydrate the stored session, if any (startup)."""
        self.session = await self.store.load()
        return self.session

    async def login(self, email: str) -> Session:
        email = (email or "").strip()
        if "@" not in email:
            raise InvalidEmail("A valid email address is required")

        stored = await self.store.load()
        self._ensure_idle()
        if stored is not None and stored.email.lower() == email.lower():
            self.session = stored
            logger.info(f"Login rehydrated account {stored.uid}")
            return stored

        session = Session(
            email=email,
            plan=Plan.FREE,
            quota=config.INITIAL_QUOTA,
            purchase_index=1,
        )
        self.session = session
        await self.store.save(session)
        logger.info(f"Created account {session.uid} for {email}")
        return session

    def logout(self) -> None:
        self._ensure_idle()
        if self.session:
            logger.info(f"Logout {self.session.uid}")
        self.session = None

    def _ensure_idle(self) -> None:
        # A run in flight persists the session it started with
        if self.pipeline.busy:
            raise PipelineBusy("Cannot switch accounts while a generation is in progress")

    def current(self) -> Session:
        if self.session is None:
            raise NotLoggedIn()
        return self.session

    def transaction_id(self, now: Optional[datetime] = None) -> str:
        return security_formula.transaction_id(self.current(), now)

    def activation_request_url(self, now: Optional[datetime] = None) -> str:
        return security_formula.activation_request_url(self.current(), now)

    async def activate(self, code: str, now: Optional[datetime] = None) -> LedgerEntry:
        """Redeem an activation code. Raises CodeMismatch on a wrong code."""
        session = self.current()
        entry = self.ledger.activate(session, code, now)
        await self.store.save(session)
        return entry

    async def generate(self, request: GenerationRequest, on_progress=None) -> GenerationResult:
        return await self.pipeline.generate(self.current(), request, on_progress)

    def stats(self) -> AccountStats:
        session = self.current()
        return AccountStats(
            uid=session.uid,
            email=session.email,
            plan=session.plan,
            quota=session.quota,
            ebook_count=session.ebook_count,
            ppt_count=session.ppt_count,
            purchase_index=session.purchase_index,
            created=session.created,
            last_activity=session.history[-1].created_at if session.history else None,
            recent_activity=list(reversed(session.history[-5:])),
        )


# Global service instance
account_service = AccountService()
