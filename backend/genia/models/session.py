"""Geni AI Session Model

One account record per device. Mutated by the ledger and the pipeline,
mirrored to the session store after every mutation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import random


class Plan(str, Enum):
    """Account plan tier"""
    FREE = "free"
    PRO = "pro"


class LedgerEntryType(str, Enum):
    """Quota movements"""
    GENERATION = "GENERATION"  # One credit consumed by a completed run
    ACTIVATION = "ACTIVATION"  # Credits added by a valid activation code


def _new_uid() -> str:
    return str(random.randint(100000, 999999))


class LedgerEntry(BaseModel):
    """Single quota movement, kept on the session for the account view."""
    entry_type: LedgerEntryType
    amount: int  # Positive for credits, negative for debits
    balance_after: int
    description: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"extra": "ignore"}


class Session(BaseModel):
    """Account record.

    `uid` is assigned at creation and never changes. Its last three digits
    take part in activation codes.
    """
    uid: str = Field(default_factory=_new_uid)
    email: str
    plan: Plan = Plan.FREE
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Quota
    quota: int = Field(default=1, ge=0)
    purchase_index: int = Field(default=1, ge=1)

    # Usage counters
    ebook_count: int = Field(default=0, ge=0)
    ppt_count: int = Field(default=0, ge=0)

    history: List[LedgerEntry] = Field(default_factory=list)

    model_config = {"extra": "ignore", "validate_assignment": True}

    @property
    def is_pro(self) -> bool:
        return self.plan == Plan.PRO


class AccountStats(BaseModel):
    """Account view"""
    uid: str
    email: str
    plan: Plan
    quota: int
    ebook_count: int
    ppt_count: int
    purchase_index: int
    created: datetime
    last_activity: Optional[datetime] = None
    recent_activity: List[LedgerEntry] = []
