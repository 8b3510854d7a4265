from .base_scraper import BaseScraper
from .search_scraper import SearchScraper
from .work_scraper import WorkScraper
from .chapter_scraper import ChapterScraper, FullWorkScraper

__all__ = ['BaseScraper', 'SearchScraper', 'WorkScraper', 'ChapterScraper', 'FullWorkScraper']
