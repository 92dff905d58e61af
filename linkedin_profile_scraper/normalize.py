"""Pure helpers that turn raw strings scraped from LinkedIn into typed values.

Nothing in here touches the browser, which keeps the parsing rules easy to
test against plain strings copied from real profiles.
"""
import re
from datetime import date, datetime
from typing import Optional, Tuple
from urllib.parse import urlparse

from dateutil import parser as date_parser

from .models import Location

_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
_RANGE_SPLIT_RE = re.compile(r"\s+[–—-]\s+|[–—]")
_ENDORSEMENT_RE = re.compile(r"(\d[\d,.]*)\s*\+?\s*endorsement", re.I)
_WORK_MODES = {"remote", "hybrid", "on-site", "onsite"}
_PRESENT_WORDS = {"present", "now", "current", "today"}

# Anchor used by dateutil for missing parts: "2020" becomes 2020-01-01.
_DEFAULT_DATE = datetime(2000, 1, 1)


def get_clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace and strip; empty results become None."""
    if text is None:
        return None
    clean = re.sub(r"\s+", " ", text).strip()
    return clean or None


def is_present_marker(text: Optional[str]) -> bool:
    clean = get_clean_text(text)
    return bool(clean) and clean.lower() in _PRESENT_WORDS


def format_date(text: Optional[str]) -> Optional[date]:
    """Parse LinkedIn style dates ("Jan 2020", "2020", "March 3, 2020").

    A four digit year is required. "Present" and unparsable text give None.
    """
    clean = get_clean_text(text)
    if not clean or is_present_marker(clean):
        return None
    if not _YEAR_RE.search(clean):
        return None
    try:
        return date_parser.parse(clean, default=_DEFAULT_DATE).date()
    except (ValueError, OverflowError):
        return None


def get_duration_in_days(start: Optional[date], end: Optional[date]) -> Optional[int]:
    if start is None or end is None:
        return None
    days = (end - start).days
    if days < 0:
        return None
    return days


def get_ongoing_duration_in_days(start: Optional[date], today: Optional[date] = None) -> Optional[int]:
    return get_duration_in_days(start, today or date.today())


def split_date_range(text: Optional[str]) -> Tuple[Optional[str], Optional[str], bool]:
    """Split "Jan 2020 - Present · 3 yrs 2 mos" into its start and end parts.

    Returns (start_text, end_text, end_is_present). A single date without a
    separator is returned as the start with no end.
    """
    clean = get_clean_text(text)
    if not clean:
        return None, None, False
    clean = clean.split("·")[0].strip()
    parts = [p.strip() for p in _RANGE_SPLIT_RE.split(clean, maxsplit=1)]
    start = parts[0] or None
    end = parts[1] if len(parts) > 1 and parts[1] else None
    end_is_present = is_present_marker(end)
    if end_is_present:
        end = None
    return start, end, end_is_present


def looks_like_date_range(text: Optional[str]) -> bool:
    clean = get_clean_text(text)
    if not clean:
        return False
    head = clean.split("·")[0]
    has_year = bool(_YEAR_RE.search(head))
    has_present = any(w in head.lower() for w in _PRESENT_WORDS)
    return has_year or (has_present and bool(_RANGE_SPLIT_RE.search(head)))


def get_location_from_text(text: Optional[str]) -> Optional[Location]:
    """Split "Amsterdam, North Holland, Netherlands" into its parts.

    Three parts map to city/province/country, two to city/country and one to
    city only. The " Area" suffix and work-mode suffixes are dropped.
    """
    clean = get_clean_text(text)
    if not clean:
        return None
    pieces = [p.strip() for p in clean.split("·")]
    pieces = [p for p in pieces if p and p.lower() not in _WORK_MODES]
    if not pieces:
        return None
    clean = re.sub(r"\s+Area$", "", pieces[0]).strip()
    parts = [p.strip() for p in clean.split(",") if p.strip()]
    if not parts:
        return None

    city = province = country = None
    if len(parts) >= 3:
        city, province, country = parts[0], parts[1], ", ".join(parts[2:])
    elif len(parts) == 2:
        city, country = parts
    else:
        city = parts[0]
    return Location(city=city, province=province, country=country)


def parse_endorsement_count(text: Optional[str]) -> int:
    clean = get_clean_text(text)
    if not clean:
        return 0
    m = _ENDORSEMENT_RE.search(clean)
    if not m:
        return 0
    digits = re.sub(r"[,.]", "", m.group(1))
    return int(digits) if digits else 0


def get_hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None
