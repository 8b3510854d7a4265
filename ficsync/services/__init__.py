from .sync_repository import SyncRepository
from .bookmark_service import BookmarkService
from .download_service import DownloadService
from .following_service import FollowingService

__all__ = ['SyncRepository', 'BookmarkService', 'DownloadService', 'FollowingService']
