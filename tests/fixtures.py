"""
Test fixtures with sample listing URLs and listing page HTML.
"""

from typing import Dict, List


class ListingURLFixtures:
    """Sample Airbnb and non-Airbnb URLs."""

    VALID_ROOM_URLS: Dict[str, str] = {
        "https://www.airbnb.com/rooms/12345678": "12345678",
        "https://www.airbnb.co.kr/rooms/87654321": "87654321",
        "https://airbnb.com/rooms/99999999": "99999999",
        "https://www.airbnb.co.jp/rooms/1234567890123": "1234567890123",
        "https://www.airbnb.co.uk/rooms/12345678/": "12345678",
        "http://www.airbnb.fr/rooms/555555": "555555",
        "https://www.airbnb.co.kr/rooms/12345678?check_in=2024-01-01&check_out=2024-01-02": "12345678",
        "https://www.airbnb.co.kr/rooms/12345678#reviews": "12345678",
    }

    HOMES_URLS: Dict[str, str] = {
        "https://www.airbnb.com/h/homes/7654321": "7654321",
        "https://airbnb.co.kr/h/homes/24681357": "24681357",
    }

    SHORT_URLS: Dict[str, str] = {
        "https://abnb.me/abc123": "abc123",
        "https://www.abnb.me/XyZ9kLm": "XyZ9kLm",
    }

    NON_AIRBNB_URLS: List[str] = [
        "https://www.google.com",
        "https://www.booking.com/hotel/123",
        "https://example.com/rooms/123",
        "https://www.vrbo.com/1234567",
        "https://abnb.me.example.com/abc",
    ]

    MALFORMED_URLS: List[str] = [
        "not-a-url",
        "not a url",
        "www.airbnb.com/rooms/12345678",
        "https://",
        "https://www.air bnb.com/rooms/12345678",
    ]

    # Airbnb domains with no listing id in the path
    NO_LISTING_URLS: List[str] = [
        "https://www.airbnb.com",
        "https://www.airbnb.com/users/show/123",
        "https://www.airbnb.com/experiences/123",
        "https://www.airbnb.co.kr/s/Seoul/homes",
        "https://m.airbnb.com/rooms/12345678",
    ]


class ListingHTMLFixtures:
    """Listing page HTML samples."""

    FULL_PAGE = """
      <!DOCTYPE html>
      <html>
      <head>
        <meta charset="utf-8">
        <title>Seoul Apartment - Airbnb</title>
        <meta property="og:title" content="Beautiful Seoul Apartment">
        <meta property="og:description" content="A cozy place in Gangnam">
        <meta property="og:image" content="https://a0.muscache.com/im/pictures/abc.jpg">
        <meta property="og:url" content="https://www.airbnb.co.kr/rooms/12345678">
        <meta property="og:site_name" content="Airbnb">
      </head>
      <body></body>
      </html>
    """

    TITLE_ONLY = "<html><head><title>Test</title></head></html>"

    NO_TAGS = """
      <html>
      <head></head>
      <body></body>
      </html>
    """

    CAPTCHA_PAGE = """
      <html>
      <head><title>Security check</title></head>
      <body>Please complete the CAPTCHA to continue.</body>
      </html>
    """

    UNUSUAL_TRAFFIC_PAGE = """
      <html>
      <head><title>Hold on</title></head>
      <body>We have detected Unusual Traffic from your network.</body>
      </html>
    """
