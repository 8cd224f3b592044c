"""
Job posting scraper.

Fetches a posting URL and reads the company name, job title and description
from the page's standard metadata (Open Graph and ``<meta>`` tags, falling
back to ``<title>``/``<h1>``). The scraper never raises: any failure comes
back as placeholder values with the error text in the description, so the
caller can still save the job and let the user edit it later.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"
NO_DESCRIPTION = "Unable to scrape job description from the provided URL."

_URL_PATTERN = re.compile(r"https?://\S+")


@dataclass(frozen=True)
class ScrapedJob:
    """Fields read from a posting page."""

    company_name: str
    job_title: str
    description: str


Scraper = Callable[[str], ScrapedJob]


def extract_url(text: str) -> Optional[str]:
    """
    Pull the first http(s) URL out of shared text.

    Examples:
        >>> extract_url("Check out this job at Acme: https://example.com/jobs/1")
        'https://example.com/jobs/1'
    """
    match = _URL_PATTERN.search(text or "")
    return match.group(0) if match else None


def _meta_content(soup: BeautifulSoup, *selectors: dict) -> Optional[str]:
    for attrs in selectors:
        tag = soup.find("meta", attrs=attrs)
        if tag is not None:
            content = (tag.get("content") or "").strip()
            if content:
                return content
    return None


def _tag_text(soup: BeautifulSoup, name: str) -> Optional[str]:
    tag = soup.find(name)
    if tag is None:
        return None
    text = tag.get_text(separator=" ", strip=True)
    return text or None


def parse_job_page(html: str) -> ScrapedJob:
    """
    Read job fields from a posting page.

    Args:
        html: Page HTML

    Returns:
        ScrapedJob, with placeholders for fields the page does not expose
    """
    soup = BeautifulSoup(html, "html.parser")

    company_name = _meta_content(
        soup, {"property": "og:site_name"}, {"name": "author"}
    ) or UNKNOWN_COMPANY

    job_title = (
        _meta_content(soup, {"property": "og:title"}, {"name": "twitter:title"})
        or _tag_text(soup, "h1")
        or _tag_text(soup, "title")
        or UNKNOWN_POSITION
    )

    description = _meta_content(
        soup,
        {"property": "og:description"},
        {"name": "description"},
        {"name": "twitter:description"},
    ) or NO_DESCRIPTION

    return ScrapedJob(
        company_name=company_name.strip(),
        job_title=job_title.strip(),
        description=description,
    )


class PageScraper:
    """
    Callable scraper bound to an HTTP session and timeout.

    Usage:
        scrape = PageScraper(timeout_seconds=10)
        info = scrape("https://example.com/jobs/1")
    """

    def __init__(self, timeout_seconds: float = 10.0, session: Optional[requests.Session] = None):
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def __call__(self, url: str) -> ScrapedJob:
        try:
            response = self.session.get(
                url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            return parse_job_page(response.text)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Scrape failed for {url}: {e}")
            return ScrapedJob(
                company_name=UNKNOWN_COMPANY,
                job_title=UNKNOWN_POSITION,
                description=f"Error scraping job: {e}",
            )
