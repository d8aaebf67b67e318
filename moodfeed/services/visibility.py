"""Which posts a viewer may see in a given feed scope.

Precedence, first match wins:

1. own post                          -> visible
2. author is a friend                -> visible (any scope)
3. FRIENDS scope                     -> hidden
4. post.is_public is True            -> visible (explicit per-post flag)
5. author snapshot private_account
   is False                          -> visible (account default)
6. otherwise                         -> hidden

Region is not considered here; EUROPE narrows the candidate set before
this runs (see feed_service.get_feed).
"""
from collections.abc import Collection
from typing import Any, Protocol
from uuid import UUID

from moodfeed.schemas.post import FeedScope


class VisiblePost(Protocol):
    user_id: UUID
    is_public: bool | None
    user_snapshot: dict[str, Any] | None


def author_is_private(snapshot: dict[str, Any] | None) -> bool:
    """Missing snapshot or settings count as private, the account default."""
    settings = (snapshot or {}).get("settings") or {}
    return settings.get("private_account", True) is not False


def is_visible(viewer_id: UUID, friend_ids: Collection[UUID], post: VisiblePost, scope: FeedScope) -> bool:
    if post.user_id == viewer_id:
        return True
    if post.user_id in friend_ids:
        return True
    if scope == FeedScope.FRIENDS:
        return False
    if post.is_public is True:
        return True
    return not author_is_private(post.user_snapshot)
