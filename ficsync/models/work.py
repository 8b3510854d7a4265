# ficsync/models/work.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from enum import Enum

ONGOING = "?"


class Rating(str, Enum):
    NOT_RATED = "Not Rated"
    GENERAL = "General Audiences"
    TEEN = "Teen And Up Audiences"
    MATURE = "Mature"
    EXPLICIT = "Explicit"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Rating":
        """Match a rating label loosely, defaulting to NOT_RATED"""
        text = (value or "").lower()
        if "not rated" in text:
            return cls.NOT_RATED
        if "general" in text:
            return cls.GENERAL
        if "teen" in text:
            return cls.TEEN
        if "mature" in text:
            return cls.MATURE
        if "explicit" in text:
            return cls.EXPLICIT
        return cls.NOT_RATED


class TagType(str, Enum):
    FANDOM = "fandom"
    RELATIONSHIP = "relationship"
    CHARACTER = "character"
    FREEFORM = "freeform"
    WARNING = "warning"
    CATEGORY = "category"
    RATING = "rating"


def is_complete(current_chapters: int, total_chapters: str) -> bool:
    """A work is complete when every planned chapter is posted and the total is known."""
    return total_chapters != ONGOING and str(current_chapters) == total_chapters


class WorkData(BaseModel):
    """Work metadata as scraped from the archive."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = "Unknown Title"
    author: str = "Anonymous"
    author_id: Optional[str] = None
    summary: str = ""
    rating: str = Rating.NOT_RATED.value
    warnings: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    fandoms: List[str] = Field(default_factory=list)
    relationships: List[str] = Field(default_factory=list)
    characters: List[str] = Field(default_factory=list)
    additional_tags: List[str] = Field(default_factory=list)
    language: str = "English"
    words: int = 0
    current_chapters: int = 1
    total_chapters: str = "1"
    kudos: int = 0
    bookmarks_count: int = 0
    hits: int = 0
    published_date: int = 0
    updated_date: int = 0
    series_name: Optional[str] = None
    series_part: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return is_complete(self.current_chapters, self.total_chapters)

    @property
    def rating_level(self) -> Rating:
        return Rating.from_string(self.rating)

    def tag_groups(self) -> Dict[TagType, List[str]]:
        """Labels grouped by tag type, rating included"""
        return {
            TagType.RATING: [self.rating] if self.rating else [],
            TagType.WARNING: list(self.warnings),
            TagType.CATEGORY: list(self.categories),
            TagType.FANDOM: list(self.fandoms),
            TagType.RELATIONSHIP: list(self.relationships),
            TagType.CHARACTER: list(self.characters),
            TagType.FREEFORM: list(self.additional_tags),
        }


class WorkInfo(WorkData):
    """A cached work together with the user's status flags."""
    cached_at: int = 0
    is_bookmarked: bool = False
    is_downloaded: bool = False
    is_following: bool = False

    @classmethod
    def from_entity(cls, entity, is_bookmarked: bool = False,
                    is_downloaded: bool = False, is_following: bool = False) -> "WorkInfo":
        return cls(
            id=entity.id,
            title=entity.title,
            author=entity.author,
            author_id=entity.author_id,
            summary=entity.summary or "",
            rating=entity.rating,
            warnings=entity.warnings or [],
            categories=entity.categories or [],
            fandoms=entity.fandoms or [],
            relationships=entity.relationships or [],
            characters=entity.characters or [],
            additional_tags=entity.additional_tags or [],
            language=entity.language,
            words=entity.words,
            current_chapters=entity.current_chapters,
            total_chapters=entity.total_chapters,
            kudos=entity.kudos,
            bookmarks_count=entity.bookmarks_count,
            hits=entity.hits,
            published_date=entity.published_date,
            updated_date=entity.updated_date,
            series_name=entity.series_name,
            series_part=entity.series_part,
            cached_at=entity.cached_at,
            is_bookmarked=is_bookmarked,
            is_downloaded=is_downloaded,
            is_following=is_following,
        )

    def to_data(self) -> WorkData:
        return WorkData(**self.model_dump(include=set(WorkData.model_fields)))
