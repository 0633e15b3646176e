"""Tests for the latest earthquakes list scraper.

Uses the `responses` library to mock HTTP requests.
"""

import pytest
import requests
import responses

from errors import FetchError
from scraper.latest_scraper import (
    LatestEarthquakeScraper,
    is_month_header,
    parse_number,
)
from scraper.models import EarthquakeSummary


BASE_URL = "https://earthquake.phivolcs.dost.gov.ph"


@pytest.fixture
def scraper():
    return LatestEarthquakeScraper(base_url=BASE_URL)


class TestParseLatest:
    """Tests for LatestEarthquakeScraper.parse_latest()."""

    def test_extracts_only_data_rows(self, scraper, latest_html):
        result = scraper.parse_latest(latest_html)

        assert result.count == 3
        assert [eq.magnitude for eq in result.data] == [4.5, 2.1, 5.2]

    def test_row_fields_match_cells(self, scraper, latest_html):
        first = scraper.parse_latest(latest_html).data[0]

        assert first == EarthquakeSummary(
            date="27 November 2025 - 10:04 AM",
            magnitude=4.5,
            latitude=14.2,
            longitude=121.1,
            depth="010",
            location="005 km N 45° W of Manila (Metro Manila)",
            details_url=(
                "https://earthquake.phivolcs.dost.gov.ph/"
                "2025_Earthquake_Information/November/2025_1127_1004_B1.html"
            ),
        )

    def test_cells_are_trimmed(self, scraper, latest_html):
        second = scraper.parse_latest(latest_html).data[1]
        assert second.latitude == 9.85

    def test_depth_kept_as_raw_text(self, scraper, latest_html):
        third = scraper.parse_latest(latest_html).data[2]
        assert third.depth == "TECTONIC 012"

    def test_row_without_link_has_no_details_url(self, scraper, latest_html):
        third = scraper.parse_latest(latest_html).data[2]
        assert third.details_url is None

    def test_preserves_upstream_order(self, scraper, latest_html):
        dates = [eq.date for eq in scraper.parse_latest(latest_html).data]
        assert dates == [
            "27 November 2025 - 10:04 AM",
            "26 November 2025 - 10:10 PM",
            "25 November 2025 - 01:15 AM",
        ]

    def test_month_header_excluded_even_with_numeric_magnitude(self, scraper):
        html = (
            "<table><tr><td>DECEMBER 2025</td><td>1</td><td>2</td>"
            "<td>3</td><td>6.0</td><td>x</td></tr></table>"
        )
        assert scraper.parse_latest(html).count == 0

    @pytest.mark.parametrize("magnitude", ["", "-", "n/a", "   "])
    def test_non_numeric_magnitude_excluded(self, scraper, magnitude):
        html = (
            "<table><tr><td>1 December 2025 - 01:00 AM</td><td>1</td><td>2</td>"
            f"<td>3</td><td>{magnitude}</td><td>x</td></tr></table>"
        )
        assert scraper.parse_latest(html).count == 0

    def test_non_numeric_coordinates_become_none(self, scraper):
        html = (
            "<table><tr><td>1 December 2025 - 01:00 AM</td><td>?</td><td></td>"
            "<td>3</td><td>3.1</td><td>x</td></tr></table>"
        )
        eq = scraper.parse_latest(html).data[0]
        assert eq.latitude is None
        assert eq.longitude is None

    def test_rows_with_fewer_than_six_cells_skipped(self, scraper):
        html = "<table><tr><td>1 December 2025</td><td>3.1</td></tr></table>"
        assert scraper.parse_latest(html).count == 0

    def test_parsing_twice_gives_identical_records(self, scraper, latest_html):
        assert scraper.parse_latest(latest_html) == scraper.parse_latest(latest_html)

    def test_to_dict_uses_wire_names(self, scraper, latest_html):
        body = scraper.parse_latest(latest_html).to_dict()

        assert body["count"] == 3
        assert set(body["data"][0]) == {
            "date",
            "magnitude",
            "latitude",
            "longitude",
            "depth",
            "location",
            "detailsUrl",
        }


class TestResolveDetailsUrl:
    """Tests for LatestEarthquakeScraper.resolve_details_url()."""

    def test_backslashes_normalized(self, scraper):
        url = scraper.resolve_details_url("2025_Earthquake_Information\\May\\a.html")
        assert url == f"{BASE_URL}/2025_Earthquake_Information/May/a.html"

    def test_leading_slash(self, scraper):
        assert scraper.resolve_details_url("/a.html") == f"{BASE_URL}/a.html"

    def test_absolute_link_kept(self, scraper):
        assert scraper.resolve_details_url("https://example.com/a.html") == "https://example.com/a.html"

    def test_empty_href(self, scraper):
        assert scraper.resolve_details_url("") is None
        assert scraper.resolve_details_url(None) is None

    def test_malformed_href_becomes_none(self, scraper):
        assert scraper.resolve_details_url("http://[bad") is None

    def test_malformed_href_keeps_other_rows(self, scraper):
        """A bad link only drops that row's details_url."""
        html = (
            "<table>"
            "<tr><td><a href='http://[bad'>2 December 2025 - 01:00 AM</a></td>"
            "<td>10.0</td><td>125.0</td><td>010</td><td>3.3</td><td>A</td></tr>"
            "<tr><td><a href='ok.html'>1 December 2025 - 01:00 AM</a></td>"
            "<td>11.0</td><td>126.0</td><td>020</td><td>2.2</td><td>B</td></tr>"
            "</table>"
        )

        result = scraper.parse_latest(html)

        assert result.count == 2
        assert result.data[0].details_url is None
        assert result.data[0].magnitude == 3.3
        assert result.data[1].details_url == f"{BASE_URL}/ok.html"


class TestHelpers:
    """Tests for module-level parsing helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [("4.5", 4.5), ("  12 ", 12.0), ("4.5 Ms", 4.5), ("-3.2", -3.2), (".5", 0.5)],
    )
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "-", "."])
    def test_parse_number_rejects(self, text):
        assert parse_number(text) is None

    def test_is_month_header(self):
        assert is_month_header("NOVEMBER 2025") is True
        assert is_month_header("November 2025") is False
        assert is_month_header("27 November 2025 - 10:04 AM") is False


class TestFetchLatest:
    """Tests for LatestEarthquakeScraper.fetch_latest()."""

    @responses.activate
    def test_fetches_and_parses(self, scraper, latest_html):
        responses.add(
            responses.GET, BASE_URL, body=latest_html, status=200, content_type="text/html"
        )

        result = scraper.fetch_latest()

        assert result.count == 3
        assert len(responses.calls) == 1

    @responses.activate
    def test_sends_browser_user_agent(self, scraper, latest_html):
        responses.add(responses.GET, BASE_URL, body=latest_html, content_type="text/html")

        scraper.fetch_latest()

        user_agent = responses.calls[0].request.headers["User-Agent"]
        assert user_agent.startswith("Mozilla/5.0")

    @responses.activate
    def test_http_error_raises_fetch_error(self, scraper):
        responses.add(responses.GET, BASE_URL, status=503)

        with pytest.raises(FetchError) as exc_info:
            scraper.fetch_latest()

        assert exc_info.value.url == BASE_URL

    @responses.activate
    def test_connection_error_is_not_retried_by_default(self, scraper):
        responses.add(
            responses.GET, BASE_URL, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(FetchError):
            scraper.fetch_latest()

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error_retried_when_configured(self, latest_html):
        scraper = LatestEarthquakeScraper(base_url=BASE_URL, max_retries=2, retry_delay=0)
        responses.add(
            responses.GET, BASE_URL, body=requests.exceptions.ConnectionError("refused")
        )
        responses.add(responses.GET, BASE_URL, body=latest_html, content_type="text/html")

        result = scraper.fetch_latest()

        assert result.count == 3
        assert len(responses.calls) == 2
