from .engine import JobEngine, JobHandle
from .progress import ProgressChannel
from .notifications import Notifier, DownloadFinished, UpdatesFound, UpdateCheckFailed

__all__ = [
    'JobEngine', 'JobHandle', 'ProgressChannel',
    'Notifier', 'DownloadFinished', 'UpdatesFound', 'UpdateCheckFailed',
]
