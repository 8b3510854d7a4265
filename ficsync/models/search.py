# ficsync/models/search.py

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from enum import Enum

from .work import Rating

# Rating tag ids used by the archive's search form
RATING_IDS = {
    Rating.NOT_RATED: "9",
    Rating.GENERAL: "10",
    Rating.TEEN: "11",
    Rating.MATURE: "12",
    Rating.EXPLICIT: "13",
}


class SortBy(str, Enum):
    UPDATED_DATE = "revised_at"
    PUBLISHED_DATE = "created_at"
    WORD_COUNT = "word_count"
    KUDOS = "kudos_count"
    HITS = "hits"
    BOOKMARKS = "bookmarks_count"
    TITLE = "title_to_sort_on"
    AUTHOR = "authors_to_sort_on"


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class SearchFilters(BaseModel):
    """Optional narrowing of a remote work search."""
    rating: Optional[Rating] = None
    fandoms: List[str] = Field(default_factory=list)
    is_complete: Optional[bool] = None
    min_words: Optional[int] = None
    max_words: Optional[int] = None
    sort_by: SortBy = SortBy.UPDATED_DATE
    sort_order: SortOrder = SortOrder.DESCENDING

    def to_query_params(self) -> Dict[str, str]:
        """
        Convert the filters to archive search query parameters.

        Returns:
            Mapping of `work_search[...]` parameter names to values
        """
        params: Dict[str, str] = {
            "work_search[sort_column]": self.sort_by.value,
            "work_search[sort_direction]": self.sort_order.value,
        }
        if self.rating is not None:
            params["work_search[rating_ids]"] = RATING_IDS[self.rating]
        if self.fandoms:
            params["work_search[fandom_names]"] = ",".join(self.fandoms)
        if self.is_complete is not None:
            params["work_search[complete]"] = "T" if self.is_complete else "F"
        if self.min_words is not None:
            params["work_search[words_from]"] = str(self.min_words)
        if self.max_words is not None:
            params["work_search[words_to]"] = str(self.max_words)
        return params
