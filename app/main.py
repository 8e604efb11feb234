"""
Roomy Listing Parser API - FastAPI Application
"""

import logging
from typing import Any, AsyncIterator, Dict
from datetime import datetime, timezone
from fastapi import Body, FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_global_settings
from app.core.error_handler import ApiError, ErrorCode, error_handler
from app.core.rate_limiter import RateLimiter
from app.models.airbnb import ManualInputValidation, ParseError, validate_manual_listing
from app.models.requests import AirbnbParseRequest
from app.models.responses import (
    AirbnbParseSuccessResponse,
    ApiErrorResponse,
    ErrorDetail,
    HealthResponse,
    ListingData,
)
from app.services.airbnb_parser import parse_airbnb_url
from app.services.http_client import ListingHttpClient
from app.services.metadata_extractor import fetch_listing_metadata, is_valid_metadata

settings = get_global_settings()
environment_config = settings.get_environment_config()

# Configure logging
logging.basicConfig(level=environment_config['log_level'])
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="API for extracting public Airbnb listing metadata for guidebook creation",
    docs_url="/docs" if environment_config['enable_docs'] else None,
    redoc_url="/redoc" if environment_config['enable_docs'] else None,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["Content-Type"],
    max_age=86400,
)

rate_limiter = RateLimiter(**settings.get_rate_limit_config())

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


def get_client_ip(request: Request) -> str:
    """Client IP, honouring proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """Dependency refusing clients over the per-IP request limit."""
    client_ip = get_client_ip(request)
    if not await rate_limiter.check(client_ip):
        raise ApiError(ErrorCode.RATE_LIMIT_EXCEEDED)


# Dependency injection for ListingHttpClient
async def get_http_client() -> AsyncIterator[ListingHttpClient]:
    """Dependency providing a ListingHttpClient that lives for one request."""
    http_client = ListingHttpClient(timeout=settings.FETCH_TIMEOUT)
    try:
        yield http_client
    finally:
        # Ensure HTTP client resources are cleaned up
        try:
            await http_client.close()
        except Exception as cleanup_error:
            logger.warning(f"Error during HTTP client cleanup: {cleanup_error}")


# Global exception handlers
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Handle API errors raised by routes and dependencies."""
    return error_handler.handle_api_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle Starlette HTTP exceptions with consistent error response format."""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    error_response = ApiErrorResponse(
        error=ErrorDetail(code=f"HTTP_{exc.status_code}", message=str(exc.detail))
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode='json')
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors (bad JSON, missing url) as INVALID_REQUEST."""
    logger.warning(f"Validation Error: {exc.errors()} - URL: {request.url}")

    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        message = "요청 본문을 파싱할 수 없습니다."
    elif request.url.path != "/api/airbnb/parse":
        message = error_handler.ERROR_MESSAGES[ErrorCode.HTTP_400]
    else:
        message = None

    return error_handler.create_json_response(ErrorCode.INVALID_REQUEST, message)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions with consistent error response format."""
    error_handler.log_error(
        ErrorCode.INTERNAL_SERVER_ERROR,
        f"Unhandled Exception: {type(exc).__name__}: {str(exc)}",
        request=request,
        exception=exc,
    )
    return error_handler.create_json_response(ErrorCode.INTERNAL_SERVER_ERROR)


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs" if environment_config['enable_docs'] else None
    }


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        service="roomy-listing-parser",
        version=settings.API_VERSION,
        environment=str(settings.ENVIRONMENT),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.post(
    "/api/airbnb/parse",
    response_model=AirbnbParseSuccessResponse,
    responses={400: {"model": ApiErrorResponse}, 429: {"model": ApiErrorResponse}},
    dependencies=[Depends(enforce_rate_limit)],
)
async def parse_airbnb_listing(
    request: AirbnbParseRequest,
    http_client: ListingHttpClient = Depends(get_http_client)
):
    """
    Parse an Airbnb listing URL and extract its public Open Graph metadata.

    A failed metadata fetch is not an error: the listing id is still returned
    so the host can fill in the remaining details by hand.

    Args:
        request: Parse request containing the listing URL
        http_client: HTTP client for the metadata fetch (injected dependency)

    Returns:
        AirbnbParseSuccessResponse: Listing id and whatever metadata was found

    Raises:
        ApiError: INVALID_URL, NOT_AIRBNB_URL or NO_LISTING_ID
    """
    url = request.url
    if len(url) > settings.MAX_URL_LENGTH:
        raise ApiError(ErrorCode.INVALID_URL, "URL이 너무 깁니다.")

    parse_result = parse_airbnb_url(url)
    if isinstance(parse_result, ParseError):
        raise ApiError.from_parse_error(parse_result)

    listing_id = parse_result.listing_id
    original_url = parse_result.original_url
    logger.info(f"Processing listing {listing_id} from {original_url}")

    metadata_result = await fetch_listing_metadata(
        original_url,
        listing_id,
        http_client=http_client
    )
    metadata = metadata_result.metadata

    if not metadata_result.success or not is_valid_metadata(metadata):
        if metadata_result.error:
            error_handler.log_metadata_failure(listing_id, metadata_result.error, original_url)

        # Listing id is still returned so the host can fill in details by hand
        return AirbnbParseSuccessResponse(
            data=ListingData(
                listing_id=listing_id,
                title=(metadata.title if metadata else None) or None,
                description=(metadata.description if metadata else None) or None,
                image_url=(metadata.image_url if metadata else None) or None,
                url=original_url,
            )
        )

    logger.info(f"Successfully extracted metadata for listing {listing_id}")
    return AirbnbParseSuccessResponse(
        data=ListingData(
            listing_id=listing_id,
            title=metadata.title,
            description=metadata.description,
            image_url=metadata.image_url,
            url=metadata.url or original_url,
        )
    )


@app.options("/api/airbnb/parse", status_code=204)
async def parse_airbnb_listing_options():
    """CORS preflight for clients that bypass the middleware."""
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@app.post("/api/airbnb/manual/validate", response_model=ManualInputValidation)
async def validate_manual_listing_input(data: Dict[str, Any] = Body(...)):
    """
    Check manually entered listing details.

    Used by the guidebook form when metadata could not be fetched. Field
    problems come back in the payload with a 200 status; only a body that is
    not a JSON object is rejected as INVALID_REQUEST.
    """
    result = validate_manual_listing(data)
    if not result.is_valid:
        logger.info(f"Manual listing input rejected: {[error.field for error in result.errors]}")
    return result
