from .archive_source import ArchiveSource

__all__ = ['ArchiveSource']
