from .work import Rating, TagType, WorkData, WorkInfo, is_complete
from .chapter import ChapterData, ChapterInfo, chapter_key
from .bookmark import BookmarkInfo
from .download import (
    DownloadStatus, DownloadInfo, DownloadProgress,
    Pending, InProgress, Completed, Failed, Cancelled,
)
from .following import FollowingType, FollowingInfo
from .search import SearchFilters, SortBy, SortOrder
from .resource import Resource, Loading, Success, Error, Result

__all__ = [
    'Rating', 'TagType', 'WorkData', 'WorkInfo', 'is_complete',
    'ChapterData', 'ChapterInfo', 'chapter_key',
    'BookmarkInfo',
    'DownloadStatus', 'DownloadInfo', 'DownloadProgress',
    'Pending', 'InProgress', 'Completed', 'Failed', 'Cancelled',
    'FollowingType', 'FollowingInfo',
    'SearchFilters', 'SortBy', 'SortOrder',
    'Resource', 'Loading', 'Success', 'Error', 'Result',
]
