"""Geni AI error taxonomy.

Services raise these; the pipeline recovers stage failures at its boundary
and the routes translate the rest into HTTP errors.
"""
from typing import Optional


class GeniaError(Exception):
    """Base exception for Geni AI operations."""
    code = "GENIA_ERROR"

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class InvalidEmail(GeniaError):
    """Login requires an email address."""
    code = "INVALID_EMAIL"


class NotLoggedIn(GeniaError):
    """No active session."""
    code = "NOT_LOGGED_IN"


class InvalidRequest(GeniaError):
    """Generation request is not valid."""
    code = "INVALID_REQUEST"


class QuotaExhausted(GeniaError):
    """Quota exhausted. Activate a premium pack to continue."""
    code = "QUOTA_EXHAUSTED"


class PipelineBusy(GeniaError):
    """A generation is already in progress."""
    code = "PIPELINE_BUSY"


class PipelineStageFailure(GeniaError):
    """A generation stage failed."""
    code = "STAGE_FAILED"

    def __init__(self, stage: str, message: str = "", cause: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        super().__init__(message or f"Stage '{stage}' failed")


class ExportFailure(PipelineStageFailure):
    """The renderer could not finalize the file."""
    code = "EXPORT_FAILED"

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        super().__init__("export", message or "Export failed", cause)


class ImageUnavailable(GeniaError):
    """Image could not be produced; the section continues without one."""
    code = "IMAGE_UNAVAILABLE"


class CodeMismatch(GeniaError):
    """Activation code is not valid for this transaction."""
    code = "CODE_MISMATCH"
