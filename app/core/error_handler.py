"""
Centralized error handling for the Roomy Listing Parser API.

Error codes, their HTTP status codes and default user-facing (Korean)
messages live here, together with the ``ApiError`` exception raised by route
handlers and the ``ErrorHandler`` that turns errors into JSON responses.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse

from app.models.airbnb import MetadataError, ParseError
from app.models.responses import ApiErrorResponse, ErrorDetail


class ErrorCode(str, Enum):
    """Enumeration of error codes returned by the API."""

    # HTTP status code specific errors
    HTTP_400 = "HTTP_400"
    HTTP_404 = "HTTP_404"
    HTTP_405 = "HTTP_405"
    HTTP_500 = "HTTP_500"

    # Request errors (4xx)
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_URL = "INVALID_URL"
    NOT_AIRBNB_URL = "NOT_AIRBNB_URL"
    NO_LISTING_ID = "NO_LISTING_ID"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(Exception):
    """Raised by route handlers and dependencies to return an error response."""

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None):
        self.error_code = error_code
        self.message = message or ErrorHandler.ERROR_MESSAGES.get(error_code, "알 수 없는 오류가 발생했습니다.")
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ErrorHandler.ERROR_STATUS_MAPPING.get(self.error_code, 500)

    @classmethod
    def from_parse_error(cls, error: ParseError) -> "ApiError":
        """Wrap a URL parse failure, keeping its user-facing message."""
        return cls(ErrorCode(error.code.value), error.message)


class ErrorHandler:
    """
    Turns error codes into JSON responses and log records.

    Every error leaves the API as ``{"success": false, "error": {"code", "message"}}``.
    """

    # Error code -> HTTP status
    ERROR_STATUS_MAPPING: Dict[ErrorCode, int] = {
        ErrorCode.HTTP_400: 400,
        ErrorCode.HTTP_404: 404,
        ErrorCode.HTTP_405: 405,
        ErrorCode.HTTP_500: 500,

        ErrorCode.INVALID_REQUEST: 400,
        ErrorCode.INVALID_URL: 400,
        ErrorCode.NOT_AIRBNB_URL: 400,
        ErrorCode.NO_LISTING_ID: 400,

        ErrorCode.RATE_LIMIT_EXCEEDED: 429,

        ErrorCode.INTERNAL_SERVER_ERROR: 500,
    }

    # Error code -> default user-facing message
    ERROR_MESSAGES: Dict[ErrorCode, str] = {
        ErrorCode.HTTP_400: "잘못된 요청입니다.",
        ErrorCode.HTTP_404: "요청한 경로를 찾을 수 없습니다.",
        ErrorCode.HTTP_405: "허용되지 않은 메서드입니다.",
        ErrorCode.HTTP_500: "서버 오류가 발생했습니다.",

        ErrorCode.INVALID_REQUEST: "url 필드가 필요합니다.",
        ErrorCode.INVALID_URL: "유효한 URL 형식이 아닙니다.",
        ErrorCode.NOT_AIRBNB_URL: "에어비앤비 URL이 아닙니다. airbnb.com 또는 airbnb.co.kr 형식의 URL을 입력해주세요.",
        ErrorCode.NO_LISTING_ID: "URL에서 숙소 ID를 찾을 수 없습니다. /rooms/숫자 형식의 URL을 입력해주세요.",
        ErrorCode.RATE_LIMIT_EXCEEDED: "요청이 너무 많습니다. 1분 후 다시 시도해주세요.",
        ErrorCode.INTERNAL_SERVER_ERROR: "예기치 않은 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def create_error_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None
    ) -> ApiErrorResponse:
        """Error envelope for ``error_code``; ``message`` replaces the default text."""
        final_message = message or self.ERROR_MESSAGES.get(error_code, "알 수 없는 오류가 발생했습니다.")

        return ApiErrorResponse(
            error=ErrorDetail(code=error_code.value, message=final_message)
        )

    def create_json_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        status_code: Optional[int] = None
    ) -> JSONResponse:
        """Error envelope as a JSONResponse with the mapped (or given) status."""
        error_response = self.create_error_response(error_code, message)
        status = status_code or self.ERROR_STATUS_MAPPING.get(error_code, 500)

        return JSONResponse(
            status_code=status,
            content=error_response.model_dump(mode='json')
        )

    def log_error(
        self,
        error_code: ErrorCode,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        url: Optional[str] = None,
        additional_context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an API error with request context attached under ``extra["context"]``.

        Server errors and errors carrying an exception are logged at ERROR
        (with traceback when there is one), client errors at WARNING.
        """
        context = {
            "error_code": error_code.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if request:
            context.update({
                "method": request.method,
                "url": str(request.url),
                "client_ip": getattr(request.client, 'host', 'unknown') if request.client else 'unknown',
            })

        if url:
            context["target_url"] = url

        if additional_context:
            context.update(additional_context)

        log_message = f"{error_code.value}: {message}"

        if exception:
            self.logger.error(log_message, extra={"context": context}, exc_info=True)
        elif self.ERROR_STATUS_MAPPING.get(error_code, 500) >= 500:
            self.logger.error(log_message, extra={"context": context})
        else:
            self.logger.warning(log_message, extra={"context": context})

    def log_metadata_failure(self, listing_id: str, error: MetadataError, url: Optional[str] = None) -> None:
        """
        Log a metadata fetch failure. The API still answers with the listing id.

        Args:
            listing_id: Listing the fetch was for
            error: Metadata error returned by the fetcher
            url: Optional listing URL
        """
        context = {
            "listing_id": listing_id,
            "metadata_error": error.code.value,
            "status_code": error.status_code,
        }
        if url:
            context["target_url"] = url

        self.logger.warning(
            f"Metadata fetch failed for {listing_id}: {error.code.value} - {error.message}",
            extra={"context": context}
        )

    def handle_api_error(self, error: ApiError, request: Optional[Request] = None) -> JSONResponse:
        """
        Log an ApiError and convert it into a JSON response.

        Args:
            error: The raised ApiError
            request: Optional FastAPI request object

        Returns:
            JSONResponse: Error response with the mapped status code
        """
        self.log_error(error.error_code, error.message, request=request)
        return self.create_json_response(error.error_code, error.message)


# Global error handler instance
error_handler = ErrorHandler()
