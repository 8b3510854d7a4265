# ficsync/sa/models/chapter.py
from sqlalchemy import String, Integer, BigInteger, Text, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class Chapter(Base):
    __tablename__ = 'chapter'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # "{work_id}_{chapter_number}"
    work_id: Mapped[str] = mapped_column(String(32), nullable=False)
    chapter_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    end_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    published_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    cached_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        UniqueConstraint('work_id', 'chapter_number', name='uq_chapter_work_number'),
        Index('idx_chapter_work_id', 'work_id'),
    )
