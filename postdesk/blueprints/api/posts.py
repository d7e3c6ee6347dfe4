from __future__ import annotations

import structlog
from flask import Blueprint, current_app, g, jsonify, request

from postdesk.blueprints.api import json_body
from postdesk.decorators import token_required
from postdesk.errors import Forbidden, InvalidIdentifier, NotFound, ValidationFailed
from postdesk.extensions import cache, limiter
from postdesk.models.post import Post
from postdesk.repositories.post import (
    DEFAULT_SORT,
    create_post,
    delete_post,
    get_post_by_hex_id,
    get_post_by_slug,
    list_posts,
    update_post,
)
from postdesk.schemas.posts import PostCreate, PostUpdate
from postdesk.services.auth import current_user
from postdesk.utils.validators import is_valid_hex_id

bp = Blueprint("posts", __name__, url_prefix="/api/posts")

log = structlog.get_logger(__name__)


# Largest OFFSET/LIMIT a signed 64-bit database integer can hold
MAX_ROW_OFFSET = 2**63 - 1


def page_params() -> tuple[int, int]:
    """Read ``page`` and ``limit``; unreadable values fall back to the defaults."""
    default_limit = current_app.config.get("POSTS_DEFAULT_PAGE_LIMIT", 10)
    page = max(request.args.get("page", 1, type=int), 1)
    limit = max(request.args.get("limit", default_limit, type=int), 1)
    max_limit = current_app.config.get("POSTS_MAX_PAGE_LIMIT")
    if max_limit:
        limit = min(limit, max_limit)
    # page * limit stays in range, and any page after the first stays past the first
    limit = min(limit, MAX_ROW_OFFSET // 2)
    page = min(page, MAX_ROW_OFFSET // limit)
    return page, limit


def load_post(post_id: str) -> Post:
    if not is_valid_hex_id(post_id):
        raise InvalidIdentifier("Invalid post ID format")
    post = get_post_by_hex_id(post_id)
    if not post:
        raise NotFound("Post not found")
    return post


def load_owned_post(post_id: str, action: str) -> Post:
    post = load_post(post_id)
    if post.author.hex_id != g.current_user["id"]:
        raise Forbidden(f"Not authorized to {action} this post")
    return post


def invalidate_listing() -> None:
    cache.clear()


@bp.get("")
@cache.cached(query_string=True)
def list_all():
    """List posts, newest first unless ``sort`` says otherwise"""
    page, limit = page_params()
    posts, total = list_posts(
        category=request.args.get("category") or None,
        page=page,
        per_page=limit,
        sort=request.args.get("sort") or DEFAULT_SORT,
    )
    return [p.to_dict() for p in posts], 200, {"X-Total-Count": str(total)}


@bp.get("/slug/<string:slug>")
def get_by_slug(slug: str):
    post = get_post_by_slug(slug)
    if not post:
        raise NotFound("Post not found")
    return jsonify(post.to_dict())


@bp.get("/<string:post_id>")
def get_by_id(post_id: str):
    return jsonify(load_post(post_id).to_dict())


@bp.post("")
@limiter.limit("30 per minute")
@token_required
def create():
    data = json_body()
    # Checked before schema validation so the messages stay exact
    if not data.get("title"):
        raise ValidationFailed("Title is required")
    if not data.get("content"):
        raise ValidationFailed("Content is required")

    payload = PostCreate.model_validate(data)
    author = current_user()
    post = create_post(
        title=payload.title,
        content=payload.content,
        slug=payload.slug,
        author_id=author.id,
        category=payload.category,
        status=payload.status,
    )
    invalidate_listing()
    log.info("post_created", post=post.hex_id, slug=post.slug)
    return jsonify(post.to_dict(expand_author=False)), 201


@bp.put("/<string:post_id>")
@limiter.limit("30 per minute")
@token_required
def update(post_id: str):
    post = load_owned_post(post_id, "update")
    payload = PostUpdate.model_validate(json_body())
    changes = payload.changes()
    updated = update_post(post, changes)
    invalidate_listing()
    log.info("post_updated", post=updated.hex_id, fields=sorted(changes))
    return jsonify(updated.to_dict(expand_author=False))


@bp.delete("/<string:post_id>")
@limiter.limit("30 per minute")
@token_required
def delete(post_id: str):
    post = load_owned_post(post_id, "delete")
    delete_post(post)
    invalidate_listing()
    log.info("post_deleted", post=post_id)
    return jsonify({"message": "Post deleted successfully"})
