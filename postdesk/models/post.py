from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from postdesk.extensions import db
from postdesk.models import generate_hex_id
from postdesk.models.user import User, utcnow
from postdesk.utils.text import calculate_reading_time

POST_STATUSES = ("draft", "published")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Post(db.Model):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    hex_id: Mapped[str] = mapped_column(db.String(32), unique=True, nullable=False, index=True, default=generate_hex_id)
    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    slug: Mapped[str] = mapped_column(db.String(220), unique=True, nullable=False, index=True)
    # Reference to a category owned by another service; not validated here
    category: Mapped[str | None] = mapped_column(db.String(64), nullable=True, index=True)
    status: Mapped[str] = mapped_column(db.String(20), nullable=False, default="draft")
    views: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    author_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author: Mapped[User] = relationship(back_populates="posts")

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'published')", name="ck_posts_status"),
        Index("ix_posts_created_at", "created_at"),
    )

    def to_dict(self, expand_author: bool = True) -> dict:
        """Serialize for the API; ``author`` is either the expanded user or its id."""
        return {
            "id": self.hex_id,
            "title": self.title,
            "content": self.content,
            "slug": self.slug,
            "author": self.author.to_public_dict() if expand_author else self.author.hex_id,
            "category": self.category,
            "status": self.status,
            "views": self.views,
            "readingTime": calculate_reading_time(self.content),
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }
