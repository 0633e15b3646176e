"""
Scraper for the PHIVOLCS latest earthquakes page.

The index page lists recent events in a table whose rows hold, in order:
date/time (linking to the event page), latitude, longitude, depth,
magnitude and location. Month header and spacer rows share the same
markup and are skipped.
"""

import re
from urllib.parse import urljoin
from bs4 import BeautifulSoup
from typing import List, Optional

from scraper.base_scraper import BasePhivolcsScraper
from scraper.models import EarthquakeSummary, LatestEarthquakes

# e.g. "NOVEMBER 2025"
MONTH_HEADER_PATTERN = re.compile(r"^[A-Z]+\s20\d{2}$")

# Leading decimal number, as accepted by a lenient float parse ("4.5", "4.5 Ms")
LEADING_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

COLUMN_COUNT = 6


def parse_number(text: str) -> Optional[float]:
    """Parse the leading number of text, or None if it does not start with one."""
    match = LEADING_NUMBER_PATTERN.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def is_month_header(date_text: str) -> bool:
    return MONTH_HEADER_PATTERN.match(date_text) is not None


class LatestEarthquakeScraper(BasePhivolcsScraper):
    """Extracts earthquake summaries from the PHIVOLCS index page."""

    logger_name = "latest_scraper"

    def resolve_details_url(self, href: Optional[str]) -> Optional[str]:
        """
        Turn a relative event link into an absolute URL.

        Links on the index page use Windows-style separators, e.g.
        "2025_Earthquake_Information\\November\\2025_1127_0204_B1.html".

        Args:
            href (str): Raw href attribute of the date cell anchor

        Returns:
            str: Absolute URL, or None if there is no usable link
        """
        if not href:
            return None
        link = href.replace("\\", "/")
        try:
            return urljoin(self.base_url + "/", link)
        except ValueError as e:
            self.logger.warning(f"Ignoring malformed details link '{href}': {e}")
            return None

    def parse_row(self, row) -> Optional[EarthquakeSummary]:
        columns = row.find_all("td")
        if len(columns) < COLUMN_COUNT:
            return None

        date_text = columns[0].get_text().strip()
        latitude_text = columns[1].get_text().strip()
        longitude_text = columns[2].get_text().strip()
        depth = columns[3].get_text().strip()
        magnitude_text = columns[4].get_text().strip()
        location = columns[5].get_text().strip()

        if not date_text or is_month_header(date_text):
            return None

        magnitude = parse_number(magnitude_text) if magnitude_text else None
        if magnitude is None:
            self.logger.debug(
                f"Skipping row '{date_text}': non-numeric magnitude '{magnitude_text}'"
            )
            return None

        anchor = columns[0].find("a")
        href = anchor.get("href", "").strip() if anchor else ""

        return EarthquakeSummary(
            date=date_text,
            magnitude=magnitude,
            latitude=parse_number(latitude_text),
            longitude=parse_number(longitude_text),
            depth=depth,
            location=location,
            details_url=self.resolve_details_url(href),
        )

    def parse_latest(self, html) -> LatestEarthquakes:
        """
        Parse the index page HTML into earthquake summaries.

        Rows keep the upstream order (newest first); nothing is re-sorted.

        Args:
            html (str | bytes): Index page document

        Returns:
            LatestEarthquakes: Admitted rows and their count
        """
        soup = BeautifulSoup(html, "html.parser")
        rows = soup.select("table tr")

        earthquakes: List[EarthquakeSummary] = []
        for row in rows:
            earthquake = self.parse_row(row)
            if earthquake is not None:
                earthquakes.append(earthquake)

        self.logger.info(
            f"Extracted {len(earthquakes)} earthquakes from {len(rows)} table rows"
        )
        return LatestEarthquakes(data=earthquakes)

    def fetch_latest(self) -> LatestEarthquakes:
        """
        Fetch and parse the PHIVOLCS latest earthquakes page.

        Returns:
            LatestEarthquakes: Parsed summaries

        Raises:
            FetchError: If the index page cannot be retrieved
        """
        self.logger.info(f"Fetching latest earthquakes from: {self.base_url}")
        response = self.fetch_page(self.base_url)
        return self.parse_latest(response.content)
