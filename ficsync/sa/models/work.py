# ficsync/sa/models/work.py
from sqlalchemy import String, Integer, BigInteger, Text, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class Work(Base):
    __tablename__ = 'work'

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    author_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rating: Mapped[str] = mapped_column(String(50), nullable=False)

    # Ordered label lists
    warnings: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    fandoms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    relationships: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    characters: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    additional_tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    language: Mapped[str] = mapped_column(String(100), nullable=False, default="English")
    words: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_chapters: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_chapters: Mapped[str] = mapped_column(String(16), nullable=False, default="1")  # "?" while ongoing
    kudos: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bookmarks_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Epoch milliseconds
    published_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    updated_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    cached_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    series_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    series_part: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index('idx_work_author', 'author'),
        Index('idx_work_title', 'title'),
        Index('idx_work_cached_at', 'cached_at'),
    )
