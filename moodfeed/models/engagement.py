"""Graph and engagement edges: friendships, friend requests, likes.

Each relation is one row per edge with a composite primary key, so the
"both sides agree" invariants hold by construction and inserts are
idempotent.
"""
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from moodfeed.db.session import Base
from moodfeed.db.types import GUID


class Friendship(Base):
    """Undirected friend edge, stored once with user_low_id < user_high_id."""
    __tablename__ = "friendships"
    __table_args__ = (CheckConstraint("user_low_id < user_high_id", name="ck_friendships_ordered"),)

    user_low_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    user_high_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @staticmethod
    def key(a, b) -> dict:
        low, high = (a, b) if a < b else (b, a)
        return {"user_low_id": low, "user_high_id": high}


class FriendRequest(Base):
    """Pending request requester -> target. Deleted when accepted, rejected or cancelled."""
    __tablename__ = "friend_requests"

    requester_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    target_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    requester = relationship("Profile", foreign_keys=[requester_id])
    target = relationship("Profile", foreign_keys=[target_id])


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="likes")
