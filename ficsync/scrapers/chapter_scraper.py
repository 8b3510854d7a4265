# ficsync/scrapers/chapter_scraper.py
from bs4 import BeautifulSoup, Tag
from typing import List

from .base_scraper import BaseScraper
from ficsync.exceptions import ChapterContentNotFoundError, WorkNotFoundError
from ficsync.models import ChapterData

BODY_SELECTOR = 'div[role="article"]'


class ChapterScraper(BaseScraper):
    """Scraper for a single chapter page."""

    def get_url(self, work_id: str, chapter_number: int) -> str:
        """Get URL for a chapter page.

        Chapter pages are addressed by position, the first chapter being
        the work page itself.
        """
        if chapter_number <= 1:
            return f"{self.base_url}/works/{work_id}?view_adult=true"
        return f"{self.base_url}/works/{work_id}/chapters/{chapter_number}?view_adult=true"

    def extract_data(self, soup: BeautifulSoup, work_id: str, chapter_number: int) -> ChapterData:
        body = soup.select_one(BODY_SELECTOR)
        if body is None:
            raise ChapterContentNotFoundError(work_id, chapter_number)
        return self.extract_chapter(soup, body, work_id, chapter_number)

    def extract_chapter(self, block: Tag, body: Tag, work_id: str, chapter_number: int) -> ChapterData:
        """
        Build a chapter record from a chapter block.

        Args:
            block: Element holding the chapter heading and notes
            body: Element holding the chapter text
            work_id: Owning work id
            chapter_number: 1-based position of the chapter

        Returns:
            The chapter record
        """
        return ChapterData(
            work_id=work_id,
            chapter_number=chapter_number,
            title=self.select_text(block, "h3.title"),
            summary=self.html_of(block.select_one("div.summary blockquote")),
            notes=self.html_of(block.select_one("div.notes:not(.end) blockquote")),
            end_notes=self.html_of(block.select_one("div.end.notes blockquote")),
            content=self.html_of(body) or "",
            word_count=len(body.get_text(" ").split()),
        )


class FullWorkScraper(ChapterScraper):
    """Scraper for the "entire work" view listing every chapter."""

    def get_url(self, work_id: str) -> str:
        return f"{self.base_url}/works/{work_id}?view_full_work=true&view_adult=true"

    def extract_data(self, soup: BeautifulSoup, work_id: str) -> List[ChapterData]:
        """Extract all chapters numbered 1..N in document order"""
        blocks = soup.select("div.chapter:not(.preface)")
        if not blocks:
            # Single-chapter works have no chapter blocks
            body = soup.select_one(BODY_SELECTOR)
            if body is None:
                if soup.select_one("div.preface") is None:
                    raise WorkNotFoundError(work_id)
                raise ChapterContentNotFoundError(work_id)
            return [self.extract_chapter(soup, body, work_id, 1)]

        chapters = []
        for index, block in enumerate(blocks, start=1):
            body = block.select_one(BODY_SELECTOR)
            if body is None:
                self.logger.warning(f"Chapter {index} of work {work_id} has no content")
                body = BeautifulSoup("", 'html.parser')
            chapters.append(self.extract_chapter(block, body, work_id, index))
        return chapters
