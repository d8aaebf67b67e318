import os
import tempfile

# Must be set before moodfeed.core.config is imported
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="moodfeed-uploads-")
os.environ["MEDIA_BASE_URL"] = "http://testserver"
os.environ["DEFAULT_TIMEZONE"] = "Europe/Berlin"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from moodfeed.api.deps import get_scorer
from moodfeed.core.security import create_access_token
from moodfeed.db.base import Base
from moodfeed.db.session import get_db
from moodfeed.main import app
from moodfeed.models.user import Profile, User
from moodfeed.schemas.mood import MoodResult
from moodfeed.schemas.post import PostCreate
from moodfeed.services.profile_service import create_profile

SAMPLE_MOOD = MoodResult(percentage=93, label="Done with Life", description="Monday energy.", color_hex="#FF0000")


class FakeScorer:
    def __init__(self, result: MoodResult = SAMPLE_MOOD):
        self.result = result
        self.calls: list[tuple[bytes, str]] = []

    async def score(self, image: bytes, mime_type: str = "image/jpeg") -> MoodResult:
        self.calls.append((image, mime_type))
        return self.result


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_profile(db):
    """Create an account + profile without going through password hashing."""
    counter = {"n": 0}

    async def _make(name: str, *, region: str = "EU", private: bool = True, location: str = "Berlin") -> Profile:
        counter["n"] += 1
        user = User(email=f"{name.lower().replace(' ', '')}{counter['n']}@example.com", password_hash="x")
        db.add(user)
        await db.flush()
        profile = await create_profile(db, user.id, name, is_private=private, region=region, location=location)
        await db.commit()
        return profile

    return _make


@pytest.fixture
def make_post(db):
    async def _make(author: Profile, *, is_public: bool | None = None, image_src: str = "https://img.example/selfie.jpg"):
        from moodfeed.services.feed_service import create_post

        post = await create_post(db, author, PostCreate(image_src=image_src, mood=SAMPLE_MOOD, is_public=is_public))
        await db.commit()
        return post

    return _make


@pytest.fixture
def scorer():
    return FakeScorer()


@pytest.fixture
async def client(session_maker, scorer):
    async def _get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_scorer] = lambda: scorer
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(profile: Profile) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(profile.id)}"}

    return _headers
