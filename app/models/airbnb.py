"""
Value objects for Airbnb listing URL parsing and Open Graph metadata extraction.

Parsing and fetching never raise: every outcome is one of the models below.
All models serialize with camelCase aliases (``listingId``, ``imageUrl``...).
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class ParseErrorCode(str, Enum):
    """Reasons a URL could not be turned into a listing id."""
    INVALID_URL = "INVALID_URL"
    NOT_AIRBNB_URL = "NOT_AIRBNB_URL"
    NO_LISTING_ID = "NO_LISTING_ID"


class MetadataErrorCode(str, Enum):
    """Reasons listing metadata could not be fetched."""
    FETCH_FAILED = "FETCH_FAILED"
    BLOCKED = "BLOCKED"
    TIMEOUT = "TIMEOUT"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ParsedListing(_CamelModel):
    """Successful parse of an Airbnb listing URL."""

    listing_id: str = Field(..., description="Numeric listing id or abnb.me short-link token")
    original_url: str = Field(..., description="Trimmed URL the id was extracted from")
    is_valid: Literal[True] = True


class ParseError(_CamelModel):
    """Failed parse of an Airbnb listing URL. ``message`` is user-facing."""

    code: ParseErrorCode
    message: str


ParseResult = Union[ParsedListing, ParseError]


class ListingMetadata(_CamelModel):
    """Open Graph metadata of a listing page. Every field is optional."""

    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    site_name: Optional[str] = None


class MetadataError(_CamelModel):
    code: MetadataErrorCode
    message: str
    status_code: Optional[int] = None


class MetadataResult(_CamelModel):
    """Outcome of a single metadata fetch."""

    success: bool
    listing_id: str
    metadata: Optional[ListingMetadata] = None
    error: Optional[MetadataError] = None


class WifiInfo(_CamelModel):
    network_name: str = Field(..., min_length=1)
    password: str


class ManualListingInput(_CamelModel):
    """Listing details a host copies by hand when metadata can't be fetched."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=5000)
    address: str = Field(..., min_length=1, max_length=500)
    amenities: List[str] = Field(default_factory=list)
    check_in: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    check_out: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    house_rules: List[str] = Field(default_factory=list)
    photos: List[str] = Field(default_factory=list)
    host_name: Optional[str] = None
    wifi_info: Optional[WifiInfo] = None


class ManualInputFieldError(_CamelModel):
    field: str
    message: str


class ManualInputValidation(_CamelModel):
    is_valid: bool
    errors: List[ManualInputFieldError] = Field(default_factory=list)


MANUAL_INPUT_MESSAGES: Dict[str, str] = {
    "missing": "필수 입력 항목입니다.",
    "string_too_short": "값을 입력해주세요.",
    "string_too_long": "입력 가능한 길이를 초과했습니다.",
    "string_pattern_mismatch": "HH:MM 형식으로 입력해주세요.",
}


def validate_manual_listing(data: Dict[str, Any]) -> ManualInputValidation:
    """
    Validate manually entered listing details.

    Accepts both camelCase (form payload) and snake_case keys. Validation
    problems are reported per top-level field instead of raised.
    """
    try:
        ManualListingInput.model_validate(data)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "__root__"
            message = MANUAL_INPUT_MESSAGES.get(err["type"], "올바르지 않은 값입니다.")
            errors.append(ManualInputFieldError(field=field, message=message))
        return ManualInputValidation(is_valid=False, errors=errors)

    return ManualInputValidation(is_valid=True)
