"""Geni AI API Routes"""

from fastapi import HTTPException

from genia.errors import (
    CodeMismatch,
    GeniaError,
    InvalidEmail,
    InvalidRequest,
    NotLoggedIn,
    PipelineBusy,
    PipelineStageFailure,
    QuotaExhausted,
)

ERROR_STATUS_CODES = {
    InvalidEmail: 400,
    InvalidRequest: 400,
    CodeMismatch: 400,
    NotLoggedIn: 401,
    QuotaExhausted: 402,
    PipelineBusy: 409,
    PipelineStageFailure: 502,
}


def http_error(error: GeniaError) -> HTTPException:
    """Map a Geni AI error onto an HTTPException."""
    status_code = 500
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"error_code": error.code, "message": error.message},
    )
