from pydantic import BaseModel
from typing import Optional

from .work import WorkInfo


class BookmarkInfo(BaseModel):
    work_id: str
    current_chapter: int = 1
    scroll_position: int = 0
    progress: float = 0.0
    bookmarked_at: int = 0
    last_read_at: int = 0
    notes: Optional[str] = None
    work: Optional[WorkInfo] = None

    @classmethod
    def from_entity(cls, entity, work: Optional[WorkInfo] = None) -> "BookmarkInfo":
        return cls(
            work_id=entity.work_id,
            current_chapter=entity.current_chapter,
            scroll_position=entity.scroll_position,
            progress=entity.progress,
            bookmarked_at=entity.bookmarked_at,
            last_read_at=entity.last_read_at,
            notes=entity.notes,
            work=work,
        )
