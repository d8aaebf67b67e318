"""Tail a conversation between two profiles, polling like the chat screen does.

Run: python scripts/watch_chat.py <viewer_id> <friend_id>   (Ctrl+C to stop)
"""
import asyncio
import sys
import os
from uuid import UUID

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from moodfeed.core.logging import setup_logging
from moodfeed.db.session import async_session_maker
from moodfeed.services.message_poller import MessagePoller
from moodfeed.services.message_service import get_messages
from moodfeed.services.profile_service import require_profile


async def watch(viewer_id: UUID, friend_id: UUID):
    async def fetch(since):
        async with async_session_maker() as session:
            viewer = await require_profile(session, viewer_id)
            return await get_messages(session, viewer, friend_id, since=since)

    def show(messages):
        for m in messages:
            who = "me" if m.sender_id == viewer_id else "them"
            extra = f" [post {m.shared_post_id}]" if m.shared_post_id else ""
            print(f"{m.created_at:%H:%M:%S} {who}: {m.content}{extra}")

    async with MessagePoller(fetch, show):
        await asyncio.Event().wait()

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: python scripts/watch_chat.py <viewer_id> <friend_id>")
        sys.exit(1)
    setup_logging()
    try:
        asyncio.run(watch(UUID(sys.argv[1]), UUID(sys.argv[2])))
    except KeyboardInterrupt:
        pass
