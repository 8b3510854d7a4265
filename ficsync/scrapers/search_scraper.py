# ficsync/scrapers/search_scraper.py
from bs4 import BeautifulSoup, Tag
from typing import List, Optional

from .base_scraper import BaseScraper
from ficsync.models import WorkData, SearchFilters, Rating


class SearchScraper(BaseScraper):
    """Scraper for work search result pages."""

    def get_url(self, query: str, page: int = 1, filters: Optional[SearchFilters] = None) -> str:
        """Get URL for a page of search results"""
        params = {"work_search[query]": query}
        if filters is not None:
            params.update(filters.to_query_params())
        params["page"] = page
        return self.build_url(f"{self.base_url}/works/search", params)

    def extract_data(self, soup: BeautifulSoup, query: str = "", page: int = 1,
                     filters: Optional[SearchFilters] = None) -> List[WorkData]:
        """Extract every work blurb on the page, skipping malformed ones"""
        works = []
        for item in soup.select("li.work"):
            try:
                work = self._extract_work(item)
            except Exception as e:
                self.logger.warning(f"Skipping search result: {e}")
                continue
            if work is not None:
                works.append(work)
        return works

    def _extract_work(self, item: Tag) -> Optional[WorkData]:
        work_id = (item.get("id") or "").replace("work_", "").strip()
        if not work_id:
            self.logger.warning("Skipping search result without a work id")
            return None

        heading = item.select_one("h4.heading")
        title = "Unknown Title"
        author = "Anonymous"
        author_id = None
        if heading is not None:
            title = self.select_text(heading, 'a[href*="/works/"]', "Unknown Title")
            author_link = heading.select_one('a[rel~="author"]')
            if author_link is not None:
                author = self.text_of(author_link, "Anonymous")
                author_id = self.author_id_from_href(author_link.get("href"))

        updated = self.parse_date(self.select_text(item, "p.datetime"))
        stats = self.parse_stats(item.select_one("dl.stats"))

        return WorkData(
            id=work_id,
            title=title,
            author=author,
            author_id=author_id,
            summary=self.select_text(item, "blockquote.summary", ""),
            rating=self.select_text(item, "span.rating", Rating.NOT_RATED.value),
            warnings=self.select_all_text(item, "li.warnings a"),
            categories=self._extract_categories(item),
            fandoms=self.select_all_text(item, "h5.fandoms a"),
            relationships=self.select_all_text(item, "li.relationships a"),
            characters=self.select_all_text(item, "li.characters a"),
            additional_tags=self.select_all_text(item, "li.freeforms a"),
            published_date=updated,
            updated_date=updated,
            **stats,
        )

    def _extract_categories(self, item: Tag) -> List[str]:
        """Categories share one span, e.g. "F/M, M/M"."""
        categories = []
        for text in self.select_all_text(item, "span.category"):
            categories.extend(part.strip() for part in text.split(",") if part.strip())
        return categories
