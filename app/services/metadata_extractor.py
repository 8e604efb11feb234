"""
Open Graph metadata extraction for Airbnb listing pages.

Only publicly exposed social-sharing tags are read. The page is fetched once,
checked for blocking interstitials, then scanned with ordered regex
alternatives per field. Failures are returned as ``MetadataError`` values.
"""

import asyncio
import logging
import re
from typing import Dict, List, Optional, Pattern

import httpx

from app.models.airbnb import (
    ListingMetadata,
    MetadataError,
    MetadataErrorCode,
    MetadataResult,
)
from app.services.http_client import DEFAULT_TIMEOUT, ListingHttpClient

logger = logging.getLogger(__name__)


def _meta_patterns(attribute: str, name: str) -> List[Pattern[str]]:
    """Both attribute orders of ``<meta {attribute}="{name}" content="...">``."""
    return [
        re.compile(
            rf"""<meta[^>]+{attribute}=["']{name}["'][^>]+content=["']([^"']+)["']""",
            re.IGNORECASE,
        ),
        re.compile(
            rf"""<meta[^>]+content=["']([^"']+)["'][^>]+{attribute}=["']{name}["']""",
            re.IGNORECASE,
        ),
    ]


# Field name -> alternatives, tried in order
OG_PATTERNS: Dict[str, List[Pattern[str]]] = {
    "title": _meta_patterns("property", "og:title") + [
        re.compile(r"<title>([^<]+)</title>", re.IGNORECASE),
    ],
    "description": _meta_patterns("property", "og:description") + [
        _meta_patterns("name", "description")[0],
    ],
    "image_url": _meta_patterns("property", "og:image"),
    "url": _meta_patterns("property", "og:url"),
    "site_name": _meta_patterns("property", "og:site_name"),
}

# Applied in this order, before numeric forms
HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&#x27;": "'",
    "&#x2F;": "/",
    "&#47;": "/",
    "&nbsp;": " ",
}

_DECIMAL_ENTITY = re.compile(r"&#(\d+);", re.ASCII)
_HEX_ENTITY = re.compile(r"&#x([0-9a-fA-F]+);")
_SURROGATE = re.compile("[\ud800-\udfff]")

BLOCKED_PATTERNS: List[Pattern[str]] = [
    re.compile(r"captcha", re.IGNORECASE),
    re.compile(r"robot", re.IGNORECASE),
    re.compile(r"blocked", re.IGNORECASE),
    re.compile(r"access denied", re.IGNORECASE),
    re.compile(r"please verify", re.IGNORECASE),
    re.compile(r"unusual traffic", re.IGNORECASE),
]
BLOCK_CHECK_LENGTH = 5000

MESSAGES = {
    "blocked_page": "에어비앤비 페이지 접근이 차단되었습니다. 잠시 후 다시 시도해주세요.",
    "timeout": "요청 시간이 초과되었습니다. 잠시 후 다시 시도해주세요.",
    "unknown_network": "알 수 없는 네트워크 오류가 발생했습니다.",
}


def _code_point(value: int, entity: str) -> str:
    try:
        return chr(value)
    except (ValueError, OverflowError):
        return entity


def decode_html_entities(text: str) -> str:
    """
    Decode the common named entities, then decimal and hex numeric entities.

    Numeric entities outside the Unicode range are left untouched. UTF-16
    surrogate pairs written as two entities are joined into one character;
    a lone surrogate becomes U+FFFD.
    """
    decoded = text
    for entity, char in HTML_ENTITIES.items():
        decoded = decoded.replace(entity, char)

    decoded = _DECIMAL_ENTITY.sub(lambda m: _code_point(int(m.group(1)), m.group(0)), decoded)
    decoded = _HEX_ENTITY.sub(lambda m: _code_point(int(m.group(1), 16), m.group(0)), decoded)

    if _SURROGATE.search(decoded):
        decoded = decoded.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")

    return decoded


def parse_og_tags(html: str) -> ListingMetadata:
    """
    Extract Open Graph metadata from raw HTML.

    Fields are independent: a missing tag leaves only that field as None.
    """
    values: Dict[str, Optional[str]] = {}

    for field, patterns in OG_PATTERNS.items():
        values[field] = None
        for pattern in patterns:
            match = pattern.search(html)
            if match and match.group(1):
                values[field] = decode_html_entities(match.group(1).strip())
                break

    return ListingMetadata(**values)


def is_blocked(html: str) -> bool:
    """Look for CAPTCHA / bot-wall markers near the top of the page."""
    head_section = html[:BLOCK_CHECK_LENGTH].lower()
    return any(pattern.search(head_section) for pattern in BLOCKED_PATTERNS)


def is_valid_metadata(metadata: Optional[ListingMetadata]) -> bool:
    """Metadata is usable when it carries a non-blank title."""
    if metadata is None:
        return False
    return metadata.title is not None and len(metadata.title.strip()) > 0


def create_error_from_status(status: int) -> MetadataError:
    """Map a non-2xx HTTP status to a metadata error."""
    if status == 403:
        return MetadataError(
            code=MetadataErrorCode.BLOCKED,
            message="접근이 거부되었습니다 (403 Forbidden).",
            status_code=403,
        )
    if status == 404:
        return MetadataError(
            code=MetadataErrorCode.FETCH_FAILED,
            message="숙소를 찾을 수 없습니다 (404 Not Found).",
            status_code=404,
        )
    if status == 429:
        # Rate limiting is reported as a block, not retried
        return MetadataError(
            code=MetadataErrorCode.BLOCKED,
            message="요청이 너무 많습니다. 잠시 후 다시 시도해주세요 (429 Too Many Requests).",
            status_code=429,
        )
    if status in (500, 502, 503):
        return MetadataError(
            code=MetadataErrorCode.FETCH_FAILED,
            message="에어비앤비 서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
            status_code=status,
        )
    return MetadataError(
        code=MetadataErrorCode.FETCH_FAILED,
        message=f"HTTP 오류가 발생했습니다 ({status}).",
        status_code=status,
    )


def _failure(listing_id: str, error: MetadataError) -> MetadataResult:
    return MetadataResult(success=False, listing_id=listing_id, metadata=None, error=error)


async def fetch_listing_metadata(
    url: str,
    listing_id: str,
    *,
    http_client: Optional[ListingHttpClient] = None,
    timeout: float = DEFAULT_TIMEOUT
) -> MetadataResult:
    """
    Fetch a listing page and extract its Open Graph metadata.

    Exactly one HTTP request is made. When ``http_client`` is not given a
    client is opened for this call only and closed afterwards.

    Args:
        url: Airbnb listing URL
        listing_id: Listing id obtained from ``parse_airbnb_url``
        http_client: Optional client to reuse (its own deadline applies)
        timeout: Deadline in seconds for a client created here

    Returns:
        MetadataResult; failures carry a MetadataError, nothing is raised.
    """
    owns_client = http_client is None
    client = http_client or ListingHttpClient(timeout=timeout)

    try:
        response = await client.get(url)
        status = response.status_code

        if not 200 <= status < 300:
            error = create_error_from_status(status)
            logger.warning(f"Metadata fetch for listing {listing_id} failed with HTTP {status}")
            return _failure(listing_id, error)

        html = response.text

        if is_blocked(html):
            logger.warning(f"Listing page for {listing_id} looks blocked (captcha / bot wall)")
            return _failure(
                listing_id,
                MetadataError(code=MetadataErrorCode.BLOCKED, message=MESSAGES["blocked_page"]),
            )

        metadata = parse_og_tags(html)
        logger.info(f"Extracted metadata for listing {listing_id} (title found: {metadata.title is not None})")
        return MetadataResult(success=True, listing_id=listing_id, metadata=metadata)

    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.warning(f"Metadata fetch for listing {listing_id} timed out")
        return _failure(
            listing_id,
            MetadataError(code=MetadataErrorCode.TIMEOUT, message=MESSAGES["timeout"]),
        )

    except Exception as e:
        logger.warning(f"Metadata fetch for listing {listing_id} failed: {type(e).__name__}: {e}")
        detail = str(e)
        message = f"네트워크 오류: {detail}" if detail else MESSAGES["unknown_network"]
        return _failure(
            listing_id,
            MetadataError(code=MetadataErrorCode.FETCH_FAILED, message=message),
        )

    finally:
        if owns_client:
            try:
                await client.close()
            except Exception as cleanup_error:
                logger.warning(f"Error during HTTP client cleanup: {cleanup_error}")
