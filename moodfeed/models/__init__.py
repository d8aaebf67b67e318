from moodfeed.models.user import Profile, User
from moodfeed.models.post import Post
from moodfeed.models.comment import Comment
from moodfeed.models.engagement import FriendRequest, Friendship, PostLike
from moodfeed.models.message import Message

__all__ = ["User", "Profile", "Post", "Comment", "Friendship", "FriendRequest", "PostLike", "Message"]
