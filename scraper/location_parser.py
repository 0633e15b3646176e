"""
Parser for the "Location" field of PHIVOLCS earthquake information pages.

The field combines coordinates and an epicenter description, e.g.
"14.20°N, 121.10°E - 005 km N 45° W of Manila (Metro Manila)".
Parsing is an ordered sequence of pattern attempts; when a pattern does
not match, the remaining text is kept as the place name instead of failing.
"""

import re
from dataclasses import dataclass
from typing import Optional

from scraper.models import Epicenter

DEGREE_SIGN = "°"

# Upstream sometimes emits the degree sign mis-encoded as one or more
# non-ASCII characters. Every non-ASCII character is assumed to be one.
NON_ASCII_PATTERN = re.compile(r"[^\x00-\x7F]")

# "<lat>°N/S, <lon>°E/W - <rest>"
COORDINATE_PATTERN = re.compile(r"([\d.]+)°[NS], ([\d.]+)°[EW] - (.+)")

# "<n> km <direction> of <place>"
EPICENTER_PATTERN = re.compile(r"^(\d+ km) (.+) of (.+)$")


@dataclass(frozen=True)
class LocationParseResult:
    latitude: Optional[str]
    longitude: Optional[str]
    epicenter: Epicenter


def normalize_location(text: str) -> str:
    return NON_ASCII_PATTERN.sub(DEGREE_SIGN, text)


def match_coordinates(text: str) -> Optional[re.Match]:
    return COORDINATE_PATTERN.search(text)


def match_epicenter(text: str) -> Optional[re.Match]:
    return EPICENTER_PATTERN.match(text)


def place_only_epicenter(text: str) -> Epicenter:
    """Fallback when no distance/direction could be recognized."""
    return Epicenter(distance="", direction="", place=text)


def parse_epicenter(text: str) -> Epicenter:
    epicenter_match = match_epicenter(text)
    if epicenter_match is None:
        return place_only_epicenter(text)

    distance, direction, place = epicenter_match.groups()
    return Epicenter(distance=distance, direction=direction, place=place)


def parse_location(text: str) -> LocationParseResult:
    """
    Split a Location string into latitude, longitude and epicenter.

    Hemisphere letters are not folded into the numbers; latitude and
    longitude are returned as the decimal strings found in the text.
    This never raises: unrecognized input becomes the epicenter place.

    Args:
        text (str): Raw Location cell text

    Returns:
        LocationParseResult: latitude/longitude (None if absent) and epicenter
    """
    normalized = normalize_location(text)

    coordinate_match = match_coordinates(normalized)
    if coordinate_match is None:
        return LocationParseResult(
            latitude=None,
            longitude=None,
            epicenter=place_only_epicenter(normalized),
        )

    latitude, longitude, rest = coordinate_match.groups()
    return LocationParseResult(
        latitude=latitude,
        longitude=longitude,
        epicenter=parse_epicenter(rest),
    )
