"""Geni AI Services"""

from .ledger import LicenseLedger, license_ledger
from .pipeline import GenerationPipeline, generation_pipeline
from .account_service import AccountService, account_service

__all__ = [
    "LicenseLedger",
    "license_ledger",
    "GenerationPipeline",
    "generation_pipeline",
    "AccountService",
    "account_service",
]
