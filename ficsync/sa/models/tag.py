# ficsync/sa/models/tag.py
from sqlalchemy import String, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class WorkTag(Base):
    """Association between works and tags"""
    __tablename__ = 'work_tag'

    work_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    tag_name: Mapped[str] = mapped_column(String(500), primary_key=True)

    __table_args__ = (
        Index('idx_work_tag_tag_name', 'tag_name'),
    )


class Tag(Base):
    __tablename__ = 'tag'

    name: Mapped[str] = mapped_column(String(500), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
