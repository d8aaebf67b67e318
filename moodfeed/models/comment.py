"""Comment model. Author name and avatar are snapshots, never refreshed."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from moodfeed.db.session import Base
from moodfeed.db.types import GUID


class Comment(Base):
    __tablename__ = "comments"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    username = Column(Text, nullable=False)
    avatar_url = Column(Text, nullable=False, default="")
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="comments")
