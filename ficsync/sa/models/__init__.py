# ficsync/sa/models/__init__.py
from .base import Base
from .work import Work
from .chapter import Chapter
from .bookmark import Bookmark
from .download import Download
from .following import Following
from .tag import Tag, WorkTag

__all__ = [
    'Base',
    'Work',
    'Chapter',
    'Bookmark',
    'Download',
    'Following',
    'Tag',
    'WorkTag',
]
