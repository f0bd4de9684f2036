"""
Boundary checks for everything that crosses into the library from outside.

URLs are screened against server-side request forgery targets before anything is fetched,
feed text is stripped of markup, and raw request parameters (keywords, dates, numbers,
categories) are validated into typed values. Failures raise InputRejected with a message
that is safe to show to the caller.
"""
from __future__ import annotations

import ipaddress
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from dateutil.parser import ParserError, parse as parse_date
from dateutil.relativedelta import relativedelta

from .exceptions import InputRejected
from .models import CATEGORIES

MAX_URL_LENGTH = 2048
MAX_KEYWORDS = 20
MAX_KEYWORD_LENGTH = 100

_ALLOWED_SCHEMES = {"http", "https"}
_METADATA_HOSTS = {"metadata.google.internal", "169.254.169.254"}
_CARRIER_NAT = ipaddress.ip_network("100.64.0.0/10")

_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_IFRAME_RE = re.compile(r"<iframe\b[^>]*>.*?</iframe\s*>", re.IGNORECASE | re.DOTALL)
_SCHEME_RE = re.compile(r"(?:javascript|data|vbscript):", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")
_TAIL_RES = (
    re.compile(r"Continue reading.*", re.IGNORECASE),
    re.compile(r"Read more.*", re.IGNORECASE),
)


def _is_blocked_address(host: str) -> bool:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    if ip.version == 4 and ip in _CARRIER_NAT:
        return True
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified or ip.is_reserved


def validate_url(url: str) -> str:
    """Return `url` unchanged if it is safe to fetch, else raise InputRejected."""
    if not isinstance(url, str) or not url:
        raise InputRejected("Invalid URL format.")
    if len(url) > MAX_URL_LENGTH:
        raise InputRejected("URL too long.")
    try:
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
    except ValueError as e:
        raise InputRejected("Invalid URL format.") from e

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        raise InputRejected("Invalid protocol. Only HTTP and HTTPS are allowed.")
    if not host:
        raise InputRejected("Invalid URL format.")
    if host == "localhost" or host.endswith(".localhost"):
        raise InputRejected("Access to localhost is not allowed.")
    if host in _METADATA_HOSTS:
        raise InputRejected("Access to metadata endpoints is not allowed.")
    if _is_blocked_address(host):
        raise InputRejected("Access to private IP ranges is not allowed.")
    return url


def sanitize_text(text: Optional[str], max_length: int = 10000) -> str:
    if not text:
        return ""
    s = text[:max_length]
    s = _SCRIPT_RE.sub("", s)
    s = _IFRAME_RE.sub("", s)
    s = _SCHEME_RE.sub("", s)
    return s.strip()


def strip_html(content: Optional[str]) -> str:
    """Plain text of an HTML fragment, whitespace collapsed, feed boilerplate tails removed."""
    if not content:
        return ""
    text = BeautifulSoup(content, "html.parser").get_text(" ")
    text = _WS_RE.sub(" ", text).strip()
    text = text.replace("[…]", "...")
    for pat in _TAIL_RES:
        text = pat.sub("", text)
    return text.strip()


def validate_keywords(keywords: Iterable[str]) -> List[str]:
    if isinstance(keywords, str) or keywords is None:
        raise InputRejected("Invalid keywords: expected a list of strings.")
    raw = list(keywords)
    if not raw:
        raise InputRejected("Invalid keywords: at least one keyword is required.")
    if len(raw) > MAX_KEYWORDS:
        raise InputRejected(f"Invalid keywords: maximum {MAX_KEYWORDS} allowed.")

    out: List[str] = []
    for k in raw:
        if not isinstance(k, str):
            raise InputRejected("Invalid keywords: all keywords must be strings.")
        k = k.strip()
        if not k:
            continue
        if len(k) > MAX_KEYWORD_LENGTH:
            raise InputRejected(f"Invalid keyword: maximum {MAX_KEYWORD_LENGTH} characters per keyword.")
        cleaned = sanitize_text(k, MAX_KEYWORD_LENGTH)
        if cleaned:
            out.append(cleaned)
    if not out:
        raise InputRejected("Invalid keywords: no valid keywords found after sanitization.")
    return out


def validate_date(value: Union[str, datetime], now: Optional[datetime] = None, *, name: str = "date") -> datetime:
    """
    Parse a caller-supplied date (YYYY-MM-DD or any ISO-8601 form) into an aware UTC datetime.

    Dates more than a year away from `now` are rejected.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = parse_date(value.strip())
        except (ParserError, ValueError, OverflowError) as e:
            raise InputRejected(f"Invalid {name}: invalid date format.") from e
    else:
        raise InputRejected(f"Invalid {name}: date string is required.")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    if dt < now - relativedelta(years=1) or dt > now + relativedelta(years=1):
        raise InputRejected(f"Invalid {name}: date must be within one year of current date.")
    return dt


def validate_date_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start and end and start > end:
        raise InputRejected("Invalid date range: dateFrom is after dateTo.")


def validate_number(value: Union[int, float], lo: float, hi: float, *, name: str = "parameter") -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        raise InputRejected(f"Invalid {name}: value must be a valid number.")
    if value < lo or value > hi:
        raise InputRejected(f"Invalid {name}: value must be between {lo} and {hi}.")
    return int(value)


def validate_category(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if value not in CATEGORIES:
        raise InputRejected(f"Invalid category: must be one of {', '.join(CATEGORIES)}.")
    return value
