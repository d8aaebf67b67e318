"""Direct message model. Immutable once written."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import relationship

from moodfeed.db.session import Base
from moodfeed.db.types import GUID


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_pair_created", "sender_id", "receiver_id", "created_at"),)

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    sender_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    shared_post_id = Column(GUID, ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    shared_post = relationship("Post")
