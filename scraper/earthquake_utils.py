"""
Helpers for querying and summarizing scraped earthquake summaries.

PHIVOLCS dates are free-form text such as "27 November 2025 - 10:04 AM";
parse_phivolcs_date turns them into datetimes where possible. Records whose
date cannot be parsed are kept, never dropped.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from scraper.models import EarthquakeSummary

SORT_FIELDS = ("date", "magnitude")
SORT_ORDERS = ("desc", "asc")
DEFAULT_PAGE_SIZE = 20
MAJOR_MAGNITUDE = 5.0

DATE_FORMATS = [
    "%d %B %Y %I:%M %p",  # 27 November 2025 10:04 AM
    "%d %B %Y %I:%M:%S %p",  # 27 November 2025 10:04:42 AM
    "%d %b %Y %I:%M %p",  # 27 Nov 2025 10:04 AM
    "%d %b %Y %I:%M:%S %p",  # 27 Nov 2025 10:04:42 AM
    "%d %B %Y %H:%M",  # 27 November 2025 22:04
    "%d %b %Y %H:%M",  # 27 Nov 2025 22:04
]

MAGNITUDE_LABELS = [
    (7.0, "Major"),
    (6.0, "Strong"),
    (5.0, "Moderate"),
    (4.0, "Light"),
    (3.0, "Minor"),
]


def parse_phivolcs_date(date_str: str) -> Optional[datetime]:
    """Convert a PHIVOLCS date string ("27 November 2025 - 10:04 AM") to datetime."""
    if not date_str:
        return None

    cleaned = " ".join(date_str.replace(" - ", " ").split())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def magnitude_label(magnitude: float) -> str:
    for threshold, label in MAGNITUDE_LABELS:
        if magnitude >= threshold:
            return label
    return "Micro"


def filter_earthquakes(
    earthquakes: Iterable[EarthquakeSummary],
    search: Optional[str] = None,
    min_magnitude: float = 0.0,
) -> List[EarthquakeSummary]:
    """
    Filter by location substring (case-insensitive) and minimum magnitude.

    A min_magnitude of 0 or less disables the magnitude filter.
    """
    filtered = list(earthquakes)

    if search:
        search_lower = search.lower()
        filtered = [eq for eq in filtered if search_lower in eq.location.lower()]

    if min_magnitude > 0:
        filtered = [eq for eq in filtered if eq.magnitude >= min_magnitude]

    return filtered


def sort_earthquakes(
    earthquakes: Iterable[EarthquakeSummary],
    sort_by: str = "date",
    sort_order: str = "desc",
) -> List[EarthquakeSummary]:
    """
    Sort summaries by date or magnitude.

    When sorting by date, records with unparseable dates follow the dated
    ones in their original order.

    Raises:
        ValueError: If sort_by or sort_order is not supported
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    if sort_order not in SORT_ORDERS:
        raise ValueError(f"Unsupported sort order: {sort_order}")

    reverse = sort_order == "desc"

    if sort_by == "magnitude":
        return sorted(earthquakes, key=lambda eq: eq.magnitude, reverse=reverse)

    dated = []
    undated = []
    for eq in earthquakes:
        parsed = parse_phivolcs_date(eq.date)
        if parsed is None:
            undated.append(eq)
        else:
            dated.append((parsed, eq))

    dated.sort(key=lambda pair: pair[0], reverse=reverse)
    return [eq for _, eq in dated] + undated


def paginate(
    earthquakes: List[EarthquakeSummary],
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Tuple[List[EarthquakeSummary], int]:
    """
    Slice one 1-based page out of earthquakes.

    Returns:
        tuple: (page items, total number of pages)

    Raises:
        ValueError: If page or page_size is less than 1
    """
    if page < 1:
        raise ValueError("page must be at least 1")
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    total_pages = math.ceil(len(earthquakes) / page_size)
    start = (page - 1) * page_size
    return earthquakes[start : start + page_size], total_pages


def data_period_info(date_strings: Iterable[str], now: Optional[datetime] = None):
    """
    Describe the time span covered by a list of PHIVOLCS dates.

    Returns:
        dict: month_year of the latest date, start/end dates and whether the
              latest date falls in the current month; None if nothing parses
    """
    dates = sorted(d for d in map(parse_phivolcs_date, date_strings) if d is not None)
    if not dates:
        return None

    now = now or datetime.now()
    start_date, end_date = dates[0], dates[-1]

    return {
        "month_year": end_date.strftime("%B %Y"),
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "is_current_month": end_date.year == now.year and end_date.month == now.month,
    }


def summarize_earthquakes(
    earthquakes: List[EarthquakeSummary], now: Optional[datetime] = None
):
    """
    Headline statistics for a list of earthquake summaries.

    PHIVOLCS dates carry no timezone; they are compared against now as
    naive local (Philippine) times.
    """
    now = now or datetime.now()
    day_ago = now - timedelta(hours=24)

    by_label = {}
    recent_24h = 0
    for eq in earthquakes:
        label = magnitude_label(eq.magnitude)
        by_label[label] = by_label.get(label, 0) + 1

        parsed = parse_phivolcs_date(eq.date)
        if parsed is not None and parsed >= day_ago:
            recent_24h += 1

    return {
        "total": len(earthquakes),
        "major": sum(1 for eq in earthquakes if eq.magnitude >= MAJOR_MAGNITUDE),
        "recent_24h": recent_24h,
        "by_label": by_label,
        "period": data_period_info((eq.date for eq in earthquakes), now=now),
    }
