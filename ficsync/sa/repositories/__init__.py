# ficsync/sa/repositories/__init__.py
from .work import WorkRepository
from .chapter import ChapterRepository
from .bookmark import BookmarkRepository
from .download import DownloadRepository
from .following import FollowingRepository
from .tag import TagRepository

__all__ = [
    'WorkRepository',
    'ChapterRepository',
    'BookmarkRepository',
    'DownloadRepository',
    'FollowingRepository',
    'TagRepository',
]
