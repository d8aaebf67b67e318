"""Account and profile models."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from moodfeed.db.session import Base
from moodfeed.db.types import GUID, JSONType

DEFAULT_SETTINGS = {"theme": "dark", "language": "en", "private_account": True}


def default_settings() -> dict:
    return dict(DEFAULT_SETTINGS)


class User(Base):
    """Login credentials. The public identity lives in Profile (same id)."""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), nullable=False)
    handle = Column(String(120), unique=True, nullable=False, index=True)
    avatar_url = Column(Text, nullable=False, default="")
    region = Column(String(16), nullable=False, default="GLOBAL", index=True)  # EU | US | ASIA | OC | AF | GLOBAL
    location = Column(String(120), nullable=False, default="Unknown")
    settings = Column(JSONType, nullable=False, default=default_settings)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")

    def snapshot(self) -> dict:
        """Denormalized copy stored on posts."""
        return {
            "id": str(self.id),
            "name": self.name,
            "handle": self.handle,
            "avatar_url": self.avatar_url,
            "region": self.region,
            "location": self.location,
            "settings": {**DEFAULT_SETTINGS, **(self.settings or {})},
        }
