"""
Airbnb listing URL parser.

Validates that a string names an Airbnb listing and extracts the listing id.
Purely syntactic: no network access, no DNS lookups. Every function is total
over its input; failures are returned as ``ParseError`` values.
"""

import logging
import re
from typing import Any, List, Optional, Pattern

import httpx

from app.models.airbnb import ParsedListing, ParseError, ParseErrorCode, ParseResult

logger = logging.getLogger(__name__)


# Tried in order, first match wins. /rooms/ must come before the abnb.me token.
AIRBNB_URL_PATTERNS: List[Pattern[str]] = [
    # Standard /rooms/ path on any airbnb.<tld> domain
    re.compile(r"^https?://(?:www\.)?airbnb\.[a-z.]+/rooms/(\d+)", re.IGNORECASE | re.ASCII),
    # Regional /h/homes/ path
    re.compile(r"^https?://(?:www\.)?airbnb\.[a-z.]+/h/homes/(\d+)", re.IGNORECASE | re.ASCII),
    # abnb.me short links
    re.compile(r"^https?://(?:www\.)?abnb\.me/([a-zA-Z0-9]+)", re.IGNORECASE | re.ASCII),
]

LISTING_ID_PATTERN = re.compile(r"[0-9]{6,15}")

SHORT_LINK_HOSTS = {"abnb.me", "www.abnb.me"}

LOCALE_DOMAINS = {
    "ko-KR": "airbnb.co.kr",
    "ja-JP": "airbnb.co.jp",
    "zh-CN": "airbnb.cn",
    "en-US": "airbnb.com",
    "en-GB": "airbnb.co.uk",
}
DEFAULT_DOMAIN = "airbnb.com"

# Schemes whose URLs must carry a host
HOST_REQUIRED_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

_VALID_HOST = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=:]*$")

MESSAGES = {
    "missing": "URL이 제공되지 않았습니다.",
    ParseErrorCode.INVALID_URL: "유효한 URL 형식이 아닙니다.",
    ParseErrorCode.NOT_AIRBNB_URL: (
        "에어비앤비 URL이 아닙니다. airbnb.com 또는 airbnb.co.kr 형식의 URL을 입력해주세요."
    ),
    ParseErrorCode.NO_LISTING_ID: (
        "URL에서 숙소 ID를 찾을 수 없습니다. /rooms/숫자 형식의 URL을 입력해주세요."
    ),
}


def _parse_url(url: str) -> Optional[httpx.URL]:
    """Parse an absolute URL, returning None when it is not one."""
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError, ValueError):
        return None

    scheme = parsed.scheme.lower()
    if not scheme:
        return None

    host = parsed.raw_host.decode("ascii", errors="replace")
    if not _VALID_HOST.match(host):
        return None
    if scheme in HOST_REQUIRED_SCHEMES and not host:
        return None

    return parsed


def is_airbnb_url(url: Any) -> bool:
    """
    Check whether ``url`` points at an Airbnb host.

    The hostname only has to *contain* ``airbnb.``, so hosts such as
    ``airbnb.evil.com`` are accepted too.
    """
    if not url or not isinstance(url, str):
        return False

    parsed = _parse_url(url)
    if parsed is None:
        return False

    hostname = parsed.raw_host.decode("ascii").lower()
    return "airbnb." in hostname or hostname in SHORT_LINK_HOSTS


def parse_airbnb_url(url: Any) -> ParseResult:
    """
    Extract the listing id from an Airbnb listing URL.

    Args:
        url: URL submitted by the host

    Returns:
        ParsedListing on success, ParseError otherwise. Never raises.
    """
    if not url or not isinstance(url, str):
        return ParseError(code=ParseErrorCode.INVALID_URL, message=MESSAGES["missing"])

    trimmed_url = url.strip()

    if _parse_url(trimmed_url) is None:
        return ParseError(
            code=ParseErrorCode.INVALID_URL,
            message=MESSAGES[ParseErrorCode.INVALID_URL],
        )

    if not is_airbnb_url(trimmed_url):
        return ParseError(
            code=ParseErrorCode.NOT_AIRBNB_URL,
            message=MESSAGES[ParseErrorCode.NOT_AIRBNB_URL],
        )

    for pattern in AIRBNB_URL_PATTERNS:
        match = pattern.match(trimmed_url)
        if match and match.group(1):
            return ParsedListing(listing_id=match.group(1), original_url=trimmed_url)

    logger.debug(f"No listing id pattern matched for {trimmed_url}")
    return ParseError(
        code=ParseErrorCode.NO_LISTING_ID,
        message=MESSAGES[ParseErrorCode.NO_LISTING_ID],
    )


def build_airbnb_url(listing_id: str, locale: str = "ko-KR") -> str:
    """
    Build the canonical listing URL on the Airbnb domain for ``locale``.

    Unknown locales fall back to airbnb.com. ``listing_id`` is not validated.
    """
    domain = LOCALE_DOMAINS.get(locale, DEFAULT_DOMAIN)
    return f"https://www.{domain}/rooms/{listing_id}"


def clean_airbnb_url(url: str) -> str:
    """Strip query string and fragment. Unparseable input is returned as is."""
    if not isinstance(url, str):
        return url

    parsed = _parse_url(url)
    if parsed is None or not parsed.raw_host:
        return url

    host = parsed.raw_host.decode("ascii").lower()
    if ":" in host:
        host = f"[{host}]"
    port = f":{parsed.port}" if parsed.port is not None else ""
    path = parsed.raw_path.decode("ascii").split("?", 1)[0] or "/"

    return f"{parsed.scheme}://{host}{port}{path}"


def is_valid_listing_id(listing_id: Any) -> bool:
    """True for purely numeric ids of 6 to 15 digits. Short-link tokens fail."""
    if not isinstance(listing_id, str):
        return False
    return LISTING_ID_PATTERN.fullmatch(listing_id) is not None
