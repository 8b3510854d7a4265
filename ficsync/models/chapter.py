# ficsync/models/chapter.py

from pydantic import BaseModel
from typing import Optional


def chapter_key(work_id: str, chapter_number: int) -> str:
    return f"{work_id}_{chapter_number}"


class ChapterData(BaseModel):
    """A single chapter as scraped from the archive."""
    work_id: str
    chapter_number: int
    title: Optional[str] = None
    summary: Optional[str] = None
    notes: Optional[str] = None
    end_notes: Optional[str] = None
    content: str = ""
    word_count: int = 0
    published_date: Optional[int] = None

    @property
    def id(self) -> str:
        return chapter_key(self.work_id, self.chapter_number)


class ChapterInfo(ChapterData):
    cached_at: int = 0

    @classmethod
    def from_entity(cls, entity) -> "ChapterInfo":
        return cls(
            work_id=entity.work_id,
            chapter_number=entity.chapter_number,
            title=entity.title,
            summary=entity.summary,
            notes=entity.notes,
            end_notes=entity.end_notes,
            content=entity.content,
            word_count=entity.word_count,
            published_date=entity.published_date,
            cached_at=entity.cached_at,
        )
