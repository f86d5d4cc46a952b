from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Success envelope around exam, submission and notification payloads."""
    message: str = Field(..., description="What the request did, e.g. 'Answers submitted successfully'.")
    data: Optional[DataType] = Field(None, description="The exam, submission, notification or count returned.")

class ErrorDetail(BaseModel):
    code: str = Field(
        ...,
        description="NOT_FOUND, FORBIDDEN, STATE_CONFLICT, VALIDATION_ERROR, UNAUTHORIZED or INTERNAL_SERVER_ERROR"
    )
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Validation errors, or the type of an unhandled exception")

class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: ErrorDetail
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp of the error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Same value as the X-Request-ID response header")

    @classmethod
    def for_request(
        cls, path: str, request_id: Optional[str], code: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> "ErrorResponse":
        return cls(
            error=ErrorDetail(code=code, message=message, details=details),
            timestamp=datetime.now(timezone.utc).isoformat(),
            path=path,
            request_id=request_id
        )
