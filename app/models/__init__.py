# Pydantic models for parsing results and request/response validation

from .airbnb import (
    ListingMetadata,
    ManualInputValidation,
    ManualListingInput,
    MetadataError,
    MetadataErrorCode,
    MetadataResult,
    ParsedListing,
    ParseError,
    ParseErrorCode,
    ParseResult,
    validate_manual_listing,
)
from .requests import AirbnbParseRequest
from .responses import (
    AirbnbParseSuccessResponse,
    ApiErrorResponse,
    ErrorDetail,
    HealthResponse,
    ListingData,
)

__all__ = [
    "ListingMetadata",
    "ManualInputValidation",
    "ManualListingInput",
    "MetadataError",
    "MetadataErrorCode",
    "MetadataResult",
    "ParsedListing",
    "ParseError",
    "ParseErrorCode",
    "ParseResult",
    "validate_manual_listing",
    "AirbnbParseRequest",
    "AirbnbParseSuccessResponse",
    "ApiErrorResponse",
    "ErrorDetail",
    "HealthResponse",
    "ListingData",
]
