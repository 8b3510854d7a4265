# ficsync/sa/models/following.py
from sqlalchemy import String, Integer, BigInteger, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class Following(Base):
    __tablename__ = 'following'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)  # work id or author id
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    followed_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_checked: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    last_known_chapters: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_update: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('idx_following_type', 'type'),
    )
