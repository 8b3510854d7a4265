# ficsync/sa/models/download.py
from sqlalchemy import String, Integer, BigInteger, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base
from ficsync.models.download import DownloadStatus


class Download(Base):
    __tablename__ = 'download'

    work_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DownloadStatus.PENDING.value)
    total_chapters: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downloaded_chapters: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    completed_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index('idx_download_status', 'status'),
    )
