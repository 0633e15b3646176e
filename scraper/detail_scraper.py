"""
Scraper for a single PHIVOLCS earthquake information page.

Event pages lay out their data as two-cell table rows ("Magnitude :" |
"Ms 4.5"). Fields are looked up by their exact label; a label missing
from the page leaves the field empty rather than failing the record.
"""

import logging
import re
from urllib.parse import urljoin
from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from requests.utils import requote_uri
from typing import Dict, Optional

from errors import FetchError
from scraper.base_scraper import BasePhivolcsScraper
from scraper.location_parser import parse_location
from scraper.models import EarthquakeDetail

logger = logging.getLogger("detail_scraper")

WHITESPACE_PATTERN = re.compile(r"\s+")

DATE_TIME_LABEL = "Date/Time"
LOCATION_LABEL = "Location"
DEPTH_LABEL = "Depth of Focus (Km)"
MAGNITUDE_LABEL = "Magnitude"
DAMAGE_LABEL = "Expecting Damage"
AFTERSHOCKS_LABEL = "Expecting Aftershocks"
ISSUED_ON_LABEL = "Issued On"
PREPARED_BY_LABEL = "Prepared by"


def get_cell_text(cell: Tag) -> str:
    """
    Visible text of a table cell.

    Direct children are joined with single spaces (elements contribute all
    of their nested text, comments nothing), then whitespace is collapsed.
    """
    parts = []
    for child in cell.contents:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Tag):
            parts.append(child.get_text())
        elif isinstance(child, NavigableString):
            parts.append(str(child))
    return WHITESPACE_PATTERN.sub(" ", " ".join(parts)).strip()


def extract_label_values(soup: BeautifulSoup) -> Dict[str, str]:
    """Map each row's first-cell label to its second-cell value (last wins)."""
    result = {}
    for tr in soup.find_all("tr"):
        tds = tr.find_all("td")
        if len(tds) < 2:
            continue
        label = re.sub(r":$", "", get_cell_text(tds[0])).strip()
        value = get_cell_text(tds[1])
        if label and value:
            result[label] = value
    return result


def resolve_map_image(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    img_tag = soup.find("img")
    if img_tag is None:
        return None
    src = img_tag.get("src")
    if not src:
        return None
    try:
        return requote_uri(urljoin(page_url, src.strip().replace("\\", "/")))
    except ValueError as e:
        logger.warning(f"Ignoring malformed map image source '{src}': {e}")
        return None


class EarthquakeDetailScraper(BasePhivolcsScraper):
    """Extracts the label/value fields of one earthquake information page."""

    logger_name = "detail_scraper"

    def parse_details(self, html, page_url: str) -> EarthquakeDetail:
        """
        Parse an earthquake information page.

        Args:
            html (str | bytes): Event page document
            page_url (str): URL the page was fetched from, used for the map image

        Returns:
            EarthquakeDetail: Extracted fields, None where a label is absent
        """
        soup = BeautifulSoup(html, "html.parser")
        fields = extract_label_values(soup)
        self.logger.debug(f"Found {len(fields)} labelled rows in {page_url}")

        latitude = None
        longitude = None
        epicenter = None

        location = fields.get(LOCATION_LABEL)
        if location:
            parsed = parse_location(location)
            latitude = parsed.latitude
            longitude = parsed.longitude
            epicenter = parsed.epicenter
            if latitude is None:
                self.logger.warning(
                    f"No coordinates recognized in location '{location}'"
                )

        return EarthquakeDetail(
            url=page_url,
            date_time=fields.get(DATE_TIME_LABEL),
            latitude=latitude,
            longitude=longitude,
            epicenter=epicenter,
            depth=fields.get(DEPTH_LABEL),
            magnitude=fields.get(MAGNITUDE_LABEL),
            expecting_damage=fields.get(DAMAGE_LABEL),
            expecting_aftershocks=fields.get(AFTERSHOCKS_LABEL),
            issued_on=fields.get(ISSUED_ON_LABEL),
            prepared_by=fields.get(PREPARED_BY_LABEL),
            map_image=resolve_map_image(soup, page_url),
        )

    def fetch_details(self, page_url: str) -> EarthquakeDetail:
        """
        Fetch and parse a single earthquake information page.

        Args:
            page_url (str): Absolute URL of the event page

        Returns:
            EarthquakeDetail: Parsed page

        Raises:
            FetchError: If the page is unreachable or is not HTML
        """
        self.logger.info(f"Scraping earthquake details: {page_url}")
        response = self.fetch_page(page_url)

        content_type = response.headers.get("Content-Type", "")
        if content_type and "html" not in content_type.lower():
            self.logger.error(f"Unexpected content type '{content_type}' for {page_url}")
            raise FetchError(page_url, f"expected HTML, got {content_type}")

        return self.parse_details(response.content, page_url)
