from postdesk.repositories.user import (
    get_user_by_hex_id,
    get_user_by_username,
    get_user_by_email,
    create_user,
)
from postdesk.repositories.post import (
    list_posts,
    get_post_by_hex_id,
    get_post_by_slug,
    create_post,
    update_post,
    delete_post,
)

__all__ = [
    # User repositories
    "get_user_by_hex_id",
    "get_user_by_username",
    "get_user_by_email",
    "create_user",
    # Post repositories
    "list_posts",
    "get_post_by_hex_id",
    "get_post_by_slug",
    "create_post",
    "update_post",
    "delete_post",
]
