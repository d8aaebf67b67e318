"""V1 API router aggregation."""
from fastapi import APIRouter

from moodfeed.api.v1.endpoints import auth, feed, friends, messages, mood, posts, uploads, users

api_router = APIRouter(prefix="/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(friends.router)
api_router.include_router(feed.router)
api_router.include_router(posts.router)
api_router.include_router(messages.router)
api_router.include_router(mood.router)
api_router.include_router(uploads.router)
