"""Geni AI Data Models"""

from .session import (
    Session,
    Plan,
    LedgerEntry,
    LedgerEntryType,
    AccountStats,
)
from .generation import (
    GenerationRequest,
    OutputKind,
    ContentDepth,
    PipelineState,
    PipelineProgress,
    Section,
    ExportedFile,
    GenerationResult,
)

__all__ = [
    # Session
    "Session",
    "Plan",
    "LedgerEntry",
    "LedgerEntryType",
    "AccountStats",
    # Generation
    "GenerationRequest",
    "OutputKind",
    "ContentDepth",
    "PipelineState",
    "PipelineProgress",
    "Section",
    "ExportedFile",
    "GenerationResult",
]
