"""
Geni AI Studio - Subject-to-Document Generator
==============================================

Turns a subject into a generated multi-section document (PDF e-book or
PPTX slide deck), paid for with a small consumable quota.

Scope:
- Quota-gated multi-stage generation pipeline (outline -> sections -> assembly)
- Paginated document and slide deck layout policies
- Time- and account-scoped activation codes replenishing the quota
- Single device session persisted to MongoDB

TRUST MODEL:
- Quota and plan entitlements are enforced client-side only
- Activation codes are verifiable by anyone who knows the formula inputs
"""

__version__ = "1.0.0"
__product__ = "Geni AI Studio"
