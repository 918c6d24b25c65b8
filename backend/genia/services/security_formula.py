"""Activation code formula.

code = ((H * 7) + U + D + (P * 5)) mod 10000

D: day of month, H: local hour (0-23), U: last three digits of the
account uid (0 when unparseable), P: purchase index.

The code is recomputed at verification time, so a code requested in one
hour is stale in the next. Anyone who knows the inputs can reproduce it;
there is no secret involved.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from genia import config
from genia.models.session import Session

CODE_MODULUS = 10000


def security_code(hour: int, day: int, uid_tail: int, purchase_index: int) -> int:
    """Expected activation code in [0, 9999]."""
    return ((hour * 7) + uid_tail + day + (purchase_index * 5)) % CODE_MODULUS


def parse_uid_tail(uid: str) -> int:
    """Last three characters of the uid as an integer, 0 when not numeric."""
    tail = (uid or "")[-3:]
    try:
        return int(tail)
    except ValueError:
        return 0


def format_code(code: int) -> str:
    """Four-digit display form."""
    return f"{code:04d}"


@dataclass(frozen=True)
class SecurityParams:
    """Formula inputs captured at one instant."""
    day: int
    hour: int
    uid_tail: int
    purchase_index: int

    @classmethod
    def capture(cls, session: Session, now: Optional[datetime] = None) -> "SecurityParams":
        now = now or datetime.now()
        return cls(
            day=now.day,
            hour=now.hour,
            uid_tail=parse_uid_tail(session.uid),
            purchase_index=session.purchase_index or 1,
        )

    def code(self) -> int:
        return security_code(self.hour, self.day, self.uid_tail, self.purchase_index)


def expected_code(session: Session, now: Optional[datetime] = None) -> int:
    return SecurityParams.capture(session, now).code()


def transaction_id(session: Session, now: Optional[datetime] = None) -> str:
    """Label used to request a code out of band. Informational only."""
    params = SecurityParams.capture(session, now)
    return f"{session.uid}-{params.day}-{params.hour}-{params.purchase_index}"


def activation_request_url(session: Session, now: Optional[datetime] = None) -> str:
    """WhatsApp link pre-filled with the transaction id."""
    message = f"Bonjour, je souhaite un code d'activation Geni AI. ID: {transaction_id(session, now)}"
    encoded = quote(message, safe="-_.!~*'()")
    return f"https://wa.me/{config.WHATSAPP_NUMBER}?text={encoded}"
