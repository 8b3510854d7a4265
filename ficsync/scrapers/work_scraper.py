# ficsync/scrapers/work_scraper.py
from bs4 import BeautifulSoup
import re
from typing import Optional, Tuple

from .base_scraper import BaseScraper
from ficsync.exceptions import WorkNotFoundError
from ficsync.models import WorkData, Rating


class WorkScraper(BaseScraper):
    """Scraper for work detail pages."""

    def get_url(self, work_id: str) -> str:
        """Get URL for work page, past the adult-content gate"""
        return f"{self.base_url}/works/{work_id}?view_adult=true"

    def extract_data(self, soup: BeautifulSoup, work_id: str) -> WorkData:
        """Extract work data from parsed HTML"""
        preface = soup.select_one("div.preface")
        if preface is None:
            raise WorkNotFoundError(work_id)

        title = self.select_text(preface, "h2.title", "Unknown Title")
        author = "Anonymous"
        author_id = None
        author_link = preface.select_one('a[rel~="author"]')
        if author_link is not None:
            author = self.text_of(author_link, "Anonymous")
            author_id = self.author_id_from_href(author_link.get("href"))

        meta = soup.select_one("dl.work.meta")
        if meta is None:
            meta = soup
        published = self.parse_date(self.select_text(meta, "dd.published"))
        updated_text = self.select_text(meta, "dd.status")
        updated = self.parse_date(updated_text) if updated_text else published
        series_name, series_part = self._extract_series(soup)
        stats = self.parse_stats(meta.select_one("dl.stats"))
        # Language sits outside the stats block on work pages
        stats["language"] = self.select_text(meta, "dd.language", "English")

        return WorkData(
            id=work_id,
            title=title,
            author=author,
            author_id=author_id,
            summary=self.html_of(preface.select_one("div.summary blockquote")) or "",
            rating=self.select_text(meta, "dd.rating a", Rating.NOT_RATED.value),
            warnings=self.select_all_text(meta, "dd.warning a"),
            categories=self.select_all_text(meta, "dd.category a"),
            fandoms=self.select_all_text(meta, "dd.fandom a"),
            relationships=self.select_all_text(meta, "dd.relationship a"),
            characters=self.select_all_text(meta, "dd.character a"),
            additional_tags=self.select_all_text(meta, "dd.freeform a"),
            published_date=published,
            updated_date=updated,
            series_name=series_name,
            series_part=series_part,
            **stats,
        )

    def _extract_series(self, soup) -> Tuple[Optional[str], Optional[int]]:
        """Extract series name and part number, e.g. "Part 2 of Some Series"."""
        series = soup.select_one("dd.series")
        if series is None:
            return None, None
        name = self.select_text(series, "span.position a") or self.select_text(series, "a")
        part = None
        position = self.select_text(series, "span.position")
        if position:
            match = re.search(r"\d+", position)
            if match:
                part = int(match.group(0))
        return name, part
