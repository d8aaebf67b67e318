"""SQLAlchemy declarative base and model imports for Alembic."""
from moodfeed.db.session import Base  # noqa: F401
from moodfeed.models.user import Profile, User  # noqa: F401
from moodfeed.models.post import Post  # noqa: F401
from moodfeed.models.comment import Comment  # noqa: F401
from moodfeed.models.engagement import FriendRequest, Friendship, PostLike  # noqa: F401
from moodfeed.models.message import Message  # noqa: F401

__all__ = ["Base", "User", "Profile", "Post", "Comment", "Friendship", "FriendRequest", "PostLike", "Message"]
