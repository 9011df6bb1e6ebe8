"""API error primitives and response helpers."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Structured API error rendered as the standard error envelope."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        trace_id: str | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.trace_id = trace_id
        self.details = details

    @classmethod
    def assessment_not_found(cls, assessment_id: str, trace_id: str | None) -> "ApiError":
        return cls(
            status_code=404,
            code="ASSESSMENT_NOT_FOUND",
            message=f"Assessment {assessment_id} not found.",
            trace_id=trace_id,
        )

    @classmethod
    def assessment_complete(cls, assessment_id: str, trace_id: str | None) -> "ApiError":
        return cls(
            status_code=409,
            code="ASSESSMENT_COMPLETE",
            message=f"Assessment {assessment_id} is complete; reset it to start again.",
            trace_id=trace_id,
        )

    @classmethod
    def assessment_incomplete(cls, assessment_id: str, trace_id: str | None) -> "ApiError":
        return cls(
            status_code=409,
            code="ASSESSMENT_INCOMPLETE",
            message=f"Assessment {assessment_id} has unanswered questions.",
            trace_id=trace_id,
        )


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build `{"error": {...}}` envelope; a trace id is generated when missing."""

    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "trace_id": trace_id or f"trc_{uuid4().hex[:8]}",
    }
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})
