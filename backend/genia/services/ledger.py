"""Geni AI License Ledger

Owns the quota counter and the purchase index:
- Quota check before a run starts
- One debit per completed run
- Activation credits from a valid code

The ledger only mutates the in-memory session. Callers persist it.
"""

from datetime import datetime
from typing import Optional
import logging

from genia import config
from genia.errors import CodeMismatch
from genia.models.generation import OutputKind
from genia.models.session import Session, Plan, LedgerEntry, LedgerEntryType
from genia.services.security_formula import SecurityParams

logger = logging.getLogger(__name__)


class LicenseLedger:
    """Quota and activation bookkeeping."""

    def __init__(self, activation_credits: int = config.ACTIVATION_CREDITS):
        self.activation_credits = activation_credits

    def check_quota(self, session: Session) -> bool:
        """True iff at least one credit is left."""
        return session.quota > 0

    def debit(self, session: Session, kind: OutputKind) -> LedgerEntry:
        """Consume one credit for a completed run of `kind`."""
        if session.quota <= 0:
            raise ValueError("Cannot debit an empty quota")

        session.quota -= 1
        if kind == OutputKind.DOCUMENT:
            session.ebook_count += 1
        else:
            session.ppt_count += 1

        entry = self._record(
            session,
            LedgerEntryType.GENERATION,
            -1,
            f"Generation: {kind.value}",
        )
        logger.info(f"Debited 1 credit from {session.uid} for {kind.value}. New quota: {session.quota}")
        return entry

    def activate(self, session: Session, entered_code: str, now: Optional[datetime] = None) -> LedgerEntry:
        """Redeem an activation code.

        The expected code is recomputed from the session's current purchase
        index. On success the index moves on, so the same code never
        validates twice. Raises CodeMismatch and leaves the session
        untouched otherwise.
        """
        params = SecurityParams.capture(session, now)
        expected = params.code()

        try:
            entered = int((entered_code or "").strip())
        except ValueError:
            logger.warning(f"Unparseable activation code for {session.uid}")
            raise CodeMismatch("Code incorrect pour cette transaction précise.")

        if entered != expected:
            logger.warning(f"Activation code mismatch for {session.uid} (index {params.purchase_index})")
            raise CodeMismatch("Code incorrect pour cette transaction précise.")

        session.plan = Plan.PRO
        session.quota += self.activation_credits
        session.purchase_index = params.purchase_index + 1

        entry = self._record(
            session,
            LedgerEntryType.ACTIVATION,
            self.activation_credits,
            f"Activation #{params.purchase_index}: {self.activation_credits} credits",
        )
        logger.info(
            f"Activated {session.uid}: +{self.activation_credits} credits, "
            f"quota {session.quota}, next purchase index {session.purchase_index}"
        )
        return entry

    def _record(self, session: Session, entry_type: LedgerEntryType, amount: int, description: str) -> LedgerEntry:
        entry = LedgerEntry(
            entry_type=entry_type,
            amount=amount,
            balance_after=session.quota,
            description=description,
        )
        session.history.append(entry)
        del session.history[:-config.LEDGER_HISTORY_LIMIT]
        return entry


# Global ledger instance
license_ledger = LicenseLedger()
