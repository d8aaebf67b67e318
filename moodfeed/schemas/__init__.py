from moodfeed.schemas.user import (
    UserCreate,
    ProfileUpdate,
    ProfilePublic,
    ProfileResponse,
    UserSettings,
    Token,
    LoginRequest,
)
from moodfeed.schemas.post import FeedScope, PostCreate, PostResponse, CommentCreate, CommentResponse
from moodfeed.schemas.message import MessageCreate, MessageResponse, ChatThread
from moodfeed.schemas.mood import MoodResult, FALLBACK_MOOD
