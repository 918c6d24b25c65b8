"""Geni AI Generation Models

A GenerationRequest is built once per run with the plan's entitlements
already applied. Nothing deeper in the pipeline re-validates it.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from dataclasses import dataclass, field
from enum import Enum

from genia import config
from genia.errors import GeniaError, InvalidRequest
from genia.models.session import Plan


class OutputKind(str, Enum):
    """Output formats"""
    DOCUMENT = "document"  # Paginated PDF e-book
    DECK = "deck"          # PPTX slide deck


class ContentDepth(str, Enum):
    """Prose depth"""
    STANDARD = "standard"
    DETAILED = "detailed"
    EXPERT = "expert"


class PipelineState(str, Enum):
    """Generation run states"""
    IDLE = "IDLE"
    OUTLINING = "OUTLINING"
    WRITING = "WRITING"
    ASSEMBLING = "ASSEMBLING"
    DONE = "DONE"
    FAILED = "FAILED"


class GenerationRequest(BaseModel):
    """Effective parameters of one generation run.

    Use `for_plan` to build one: it applies entitlement clamping so a
    non-pro account can never reach the content provider with elevated
    parameters.
    """
    subject: str = Field(min_length=1)
    kind: OutputKind
    section_count: int = Field(ge=1)
    depth: ContentDepth = ContentDepth.STANDARD
    style: Optional[str] = None  # Deck only
    language: str = config.LANGUAGE

    model_config = {"frozen": True}

    @classmethod
    def for_plan(
        cls,
        plan: Plan,
        subject: str,
        kind: OutputKind,
        section_count: Optional[int] = None,
        depth: Optional[ContentDepth] = None,
        style: Optional[str] = None,
        language: Optional[str] = None,
    ) -> "GenerationRequest":
        subject = (subject or "").strip()
        if not subject:
            raise InvalidRequest("Subject is required")

        if plan == Plan.PRO:
            count = section_count if section_count is not None else config.FREE_SECTION_COUNT
            count = max(config.MIN_SECTION_COUNT, min(config.MAX_SECTION_COUNT, count))
            effective_depth = depth or ContentDepth(config.DEFAULT_DEPTH)
            effective_style = (style or "").strip() or config.DEFAULT_DECK_STYLE
        else:
            count = config.FREE_SECTION_COUNT
            effective_depth = ContentDepth(config.DEFAULT_DEPTH)
            effective_style = config.DEFAULT_DECK_STYLE

        return cls(
            subject=subject,
            kind=kind,
            section_count=count,
            depth=effective_depth,
            style=effective_style if kind == OutputKind.DECK else None,
            language=language or config.LANGUAGE,
        )


class Section(BaseModel):
    """Outline item"""
    title: str
    brief: str = ""
    image_prompt: str = ""

    model_config = {"extra": "ignore"}


@dataclass
class PipelineProgress:
    """Progress event emitted while a run advances."""
    state: PipelineState
    index: int = 0
    total: int = 0
    message: str = ""


@dataclass
class ExportedFile:
    """Finalized output file."""
    filename: str
    media_type: str
    content: bytes
    path: Optional[str] = None


@dataclass
class GenerationResult:
    """Outcome of a generation run."""
    status: PipelineState
    kind: OutputKind
    subject: str
    sections_total: int = 0
    sections_written: int = 0
    images_missing: int = 0
    file: Optional[ExportedFile] = None
    error: Optional[GeniaError] = None
    failed_stage: Optional[str] = None
    quota_after: Optional[int] = None
    execution_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == PipelineState.DONE

    def to_dict(self):
        return {
            "success": self.success,
            "status": self.status.value,
            "kind": self.kind.value,
            "subject": self.subject,
            "sections_total": self.sections_total,
            "sections_written": self.sections_written,
            "images_missing": self.images_missing,
            "filename": self.file.filename if self.file else None,
            "error_code": self.error.code if self.error else None,
            "error_message": self.error.message if self.error else None,
            "failed_stage": self.failed_stage,
            "quota_after": self.quota_after,
            "execution_time_ms": self.execution_time_ms,
            "warnings": self.warnings,
        }
