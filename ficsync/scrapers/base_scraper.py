# ficsync/scrapers/base_scraper.py

from bs4 import BeautifulSoup, Tag
import logging
from typing import Optional, Dict, List, Any, Tuple
from abc import ABC, abstractmethod
from datetime import datetime
from urllib.parse import urlencode
import re

from ficsync.config import DEFAULT_BASE_URL
from ficsync.exceptions import ParseError
from ficsync.utils.http import ArchiveDownloader
from ficsync.utils.time_utils import now_millis

DATE_FORMAT = "%Y-%m-%d"


class BaseScraper(ABC):
    """Base class for all archive page scrapers providing common functionality."""

    def __init__(self, downloader: Optional[ArchiveDownloader] = None, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize the base scraper.

        Args:
            downloader: Page downloader used by `scrape`
            base_url: Archive root, without a trailing slash
        """
        self.downloader = downloader
        self.base_url = base_url.rstrip("/")
        self._setup_logging()

    def _setup_logging(self):
        """Set up logging for the scraper."""
        self.logger = logging.getLogger(self.__class__.__name__)
        if not self.logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def build_url(self, base: str, params: Dict[str, Any]) -> str:
        """
        Construct a URL with query parameters.

        Args:
            base: The base URL.
            params: Dictionary of query parameters.

        Returns:
            The constructed URL as a string.
        """
        return f"{base}?{urlencode(params)}"

    def parse_html(self, html: str) -> BeautifulSoup:
        """
        Parse HTML content into a BeautifulSoup object.

        Args:
            html: The HTML content to parse.

        Returns:
            A BeautifulSoup object.

        Raises:
            ParseError: If the document is empty.
        """
        if not html or not html.strip():
            raise ParseError("Empty document")
        return BeautifulSoup(html, 'html.parser')

    def extract_id_from_url(self, url: str, pattern: str) -> Optional[str]:
        """
        Extract an ID from a URL using a regex pattern.

        Args:
            url: The URL to extract from.
            pattern: Regex pattern to match.

        Returns:
            Extracted ID or None if not found.
        """
        match = re.search(pattern, url)
        return match.group(1) if match else None

    # Field helpers. Missing cosmetic fields resolve to defaults, never errors.

    def text_of(self, element: Optional[Tag], default: Optional[str] = None) -> Optional[str]:
        """Whitespace-normalized text of an element"""
        if element is None:
            return default
        text = " ".join(element.get_text().split())
        return text if text else default

    def html_of(self, element: Optional[Tag]) -> Optional[str]:
        """Inner HTML of an element, or None when absent"""
        if element is None:
            return None
        return element.decode_contents().strip()

    def select_text(self, root: Tag, selector: str, default: Optional[str] = None) -> Optional[str]:
        return self.text_of(root.select_one(selector), default)

    def select_all_text(self, root: Tag, selector: str) -> List[str]:
        """Text of every matching element, blanks dropped"""
        values = []
        for element in root.select(selector):
            text = self.text_of(element)
            if text:
                values.append(text)
        return values

    def parse_int(self, text: Optional[str], default: int = 0) -> int:
        """Parse a display number such as "12,345"."""
        if not text:
            return default
        try:
            return int(text.replace(",", "").strip())
        except ValueError:
            return default

    def parse_chapters(self, text: Optional[str]) -> Tuple[int, str]:
        """
        Split a chapter count like "3/10" or "3/?".

        Args:
            text: The chapters stat as displayed

        Returns:
            Tuple of (current chapters, total chapters as a string)
        """
        parts = (text or "1/1").split("/")
        current = self.parse_int(parts[0], 1)
        total = parts[1].strip() if len(parts) > 1 and parts[1].strip() else "1"
        return current, total

    def parse_date(self, text: Optional[str]) -> int:
        """
        Parse a `yyyy-MM-dd` date to epoch milliseconds.

        Unparseable or absent dates resolve to the current time.
        """
        if text:
            try:
                return int(datetime.strptime(text.strip(), DATE_FORMAT).timestamp() * 1000)
            except ValueError:
                self.logger.debug(f"Unparseable date {text!r}, using current time")
        return now_millis()

    def parse_stats(self, stats: Optional[Tag]) -> Dict[str, Any]:
        """Read the `dl.stats` block shared by search results and work pages."""
        root = stats if stats is not None else BeautifulSoup("", 'html.parser')
        current, total = self.parse_chapters(self.select_text(root, "dd.chapters"))
        return {
            'language': self.select_text(root, "dd.language", "English"),
            'words': self.parse_int(self.select_text(root, "dd.words")),
            'current_chapters': current,
            'total_chapters': total,
            'kudos': self.parse_int(self.select_text(root, "dd.kudos")),
            'bookmarks_count': self.parse_int(self.select_text(root, "dd.bookmarks")),
            'hits': self.parse_int(self.select_text(root, "dd.hits")),
        }

    def author_id_from_href(self, href: Optional[str]) -> Optional[str]:
        if not href:
            return None
        return self.extract_id_from_url(href, r"/users/([^/?#]+)")

    @abstractmethod
    def get_url(self, *identifier: Any) -> str:
        """
        Get the URL for an identifier.
        Must be implemented by derived classes.

        Returns:
            The constructed URL as a string.
        """
        pass

    @abstractmethod
    def extract_data(self, soup: BeautifulSoup, *identifier: Any) -> Any:
        """
        Extract data from parsed HTML.
        Must be implemented by derived classes.

        Args:
            soup: The parsed HTML.
            identifier: The identifier being scraped.

        Returns:
            The extracted record(s).
        """
        pass

    def parse(self, html: str, *identifier: Any) -> Any:
        """Parse an already downloaded page."""
        return self.extract_data(self.parse_html(html), *identifier)

    def scrape(self, *identifier: Any) -> Any:
        """
        Main scraping method that coordinates the scraping process.

        Args:
            identifier: The identifier of the item to scrape.

        Returns:
            The extracted record(s).

        Raises:
            TransportError: If the page cannot be downloaded.
            ParseError: If a required part of the page is missing.
        """
        if self.downloader is None:
            raise RuntimeError(f"{self.__class__.__name__} has no downloader")
        url = self.get_url(*identifier)
        html = self.downloader.download_url(url)
        return self.parse(html, *identifier)
