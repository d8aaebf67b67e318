"""Post model (mood-scored selfie)."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from moodfeed.db.session import Base
from moodfeed.db.types import GUID, JSONType


class Post(Base):
    __tablename__ = "posts"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_snapshot = Column(JSONType, nullable=False)  # author profile at write time, see Profile.snapshot
    image_src = Column(Text, nullable=False)
    mood = Column(JSONType, nullable=False)  # {percentage, label, description, color_hex}
    region = Column(String(16), nullable=False, default="GLOBAL", index=True)  # author's region, not the viewer's
    location = Column(String(120), nullable=True)
    is_public = Column(Boolean, nullable=True)  # explicit override; NULL falls back to author privacy
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    author = relationship("Profile", back_populates="posts")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
