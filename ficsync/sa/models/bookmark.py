# ficsync/sa/models/bookmark.py
from sqlalchemy import String, Integer, BigInteger, Float, Text
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class Bookmark(Base):
    __tablename__ = 'bookmark'

    work_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    current_chapter: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    scroll_position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    bookmarked_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_read_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
