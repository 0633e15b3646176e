"""
Shared HTTP fetch policy for PHIVOLCS scrapers.

The PHIVOLCS site serves a certificate chain that fails validation and
rejects default client user agents, so every request disables certificate
verification and sends browser-like headers.
"""

import time
import urllib3
import requests
from bs4 import BeautifulSoup
from typing import Optional

from config import DEFAULT_BASE_URL, DEFAULT_USER_AGENT
from errors import FetchError
from log_config import setup_logger


class BasePhivolcsScraper:
    """Fetches PHIVOLCS pages; subclasses turn the HTML into records."""

    logger_name = "phivolcs_scraper"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
        max_retries: int = 1,
        retry_delay: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = setup_logger(self.logger_name)

        # Disable SSL warnings
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @classmethod
    def from_settings(cls, settings):
        return cls(
            base_url=settings.base_url,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
        )

    def _headers(self):
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }

    def fetch_page(self, url: str) -> requests.Response:
        """
        Fetch a PHIVOLCS page.

        Connection errors and timeouts are retried with exponential backoff
        only when max_retries > 1; the default is a single attempt. Any
        other request failure (including non-2xx statuses) is raised at once.

        Args:
            url (str): Absolute URL to fetch

        Returns:
            requests.Response: Successful HTTP response

        Raises:
            FetchError: If the page could not be retrieved
        """
        for attempt in range(self.max_retries):
            try:
                response = requests.get(
                    url,
                    verify=False,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                self.logger.info(
                    f"Successfully fetched: {url} (Status: {response.status_code}, Attempt: {attempt + 1})"
                )
                return response

            except (
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
            ) as e:
                self.logger.warning(
                    f"Connection failed for {url} (attempt {attempt + 1}/{self.max_retries}): {e}"
                )

                if attempt < self.max_retries - 1:
                    delay = self.retry_delay * (2**attempt)  # Exponential backoff
                    self.logger.info(f"Retrying in {delay} seconds...")
                    time.sleep(delay)
                else:
                    self.logger.error(f"All fetch attempts failed for {url}")
                    raise FetchError(url, str(e)) from e

            except requests.exceptions.RequestException as e:
                self.logger.error(f"Failed to fetch {url}: {e}")
                raise FetchError(url, str(e)) from e

    def fetch_soup(self, url: str) -> BeautifulSoup:
        response = self.fetch_page(url)
        return BeautifulSoup(response.content, "html.parser")
