from __future__ import annotations

import re
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from postdesk.errors import ValidationFailed
from postdesk.extensions import db
from postdesk.models.post import Post
from postdesk.utils.db_retry import retry_db_operation

DEFAULT_SORT = "-createdAt"

# Public sort keys and the columns they order by
SORT_FIELDS = {
    "createdAt": Post.created_at,
    "updatedAt": Post.updated_at,
    "title": Post.title,
    "slug": Post.slug,
    "status": Post.status,
    "views": Post.views,
}

# Fields an update is allowed to touch
UPDATABLE_FIELDS = ("title", "content", "slug", "category", "status")


def build_order_by(sort: str | None) -> list:
    """
    Translate a sort expression such as ``"-createdAt"`` or ``"status -views"``
    into ORDER BY clauses. A leading ``-`` means descending.
    """
    clauses = []
    first_descending = True
    for position, token in enumerate(t for t in re.split(r"[\s,]+", (sort or DEFAULT_SORT).strip()) if t):
        descending = token.startswith("-")
        name = token.lstrip("+-")
        column = SORT_FIELDS.get(name)
        if column is None:
            raise ValidationFailed(f"Invalid sort field: {name}")
        clauses.append(column.desc() if descending else column.asc())
        if position == 0:
            first_descending = descending
    if not clauses:
        clauses.append(Post.created_at.desc())
    # Stable order for rows that tie on the requested keys
    clauses.append(Post.id.desc() if first_descending else Post.id.asc())
    return clauses


@retry_db_operation()
def list_posts(
    *,
    category: str | None = None,
    page: int = 1,
    per_page: int = 10,
    sort: str | None = DEFAULT_SORT,
) -> tuple[list[Post], int]:
    stmt = db.select(Post).options(joinedload(Post.author))
    if category:
        stmt = stmt.filter_by(category=category)
    stmt = stmt.order_by(*build_order_by(sort))
    pag = db.paginate(stmt, page=page, per_page=per_page, max_per_page=None, error_out=False)
    return list(pag.items), pag.total or 0


@retry_db_operation()
def get_post_by_hex_id(hex_id: str) -> Optional[Post]:
    stmt = db.select(Post).options(joinedload(Post.author)).filter_by(hex_id=hex_id.lower())
    return db.session.execute(stmt).scalar_one_or_none()


@retry_db_operation()
def get_post_by_slug(slug: str) -> Optional[Post]:
    stmt = db.select(Post).options(joinedload(Post.author)).filter_by(slug=slug)
    return db.session.execute(stmt).scalar_one_or_none()


def create_post(
    *,
    title: str,
    content: str,
    slug: str,
    author_id: int,
    category: str | None = None,
    status: str | None = None,
) -> Post:
    p = Post(
        title=title,
        content=content,
        slug=slug,
        author_id=author_id,
        category=category,
    )
    if status is not None:
        p.status = status
    db.session.add(p)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    return p


def update_post(p: Post, changes: dict[str, Any]) -> Post:
    """Apply whitelisted field changes; anything else, ``author`` included, is ignored."""
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(p, field, changes[field])
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    return p


def delete_post(p: Post) -> None:
    db.session.delete(p)
    db.session.commit()
