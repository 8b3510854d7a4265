from pydantic import BaseModel
from typing import Optional
from enum import Enum


class FollowingType(str, Enum):
    WORK = "WORK"
    AUTHOR = "AUTHOR"


class FollowingInfo(BaseModel):
    id: str
    type: FollowingType
    name: str
    followed_at: int = 0
    last_checked: Optional[int] = None
    last_known_chapters: int = 0
    has_update: bool = False

    @classmethod
    def from_entity(cls, entity) -> "FollowingInfo":
        return cls(
            id=entity.id,
            type=FollowingType(entity.type),
            name=entity.name,
            followed_at=entity.followed_at,
            last_checked=entity.last_checked,
            last_known_chapters=entity.last_known_chapters,
            has_update=entity.has_update,
        )
