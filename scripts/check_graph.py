"""Report friend-graph rows that break the graph invariants.

- friend request to self
- pending request between users who are already friends
- friendship stored out of order (low >= high)
Run: python scripts/check_graph.py [--fix]
"""
import asyncio
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import and_, delete, select
from moodfeed.db.session import async_session_maker
from moodfeed.models.engagement import FriendRequest, Friendship


async def find_problems(session) -> list[tuple[str, FriendRequest | Friendship]]:
    problems = []
    requests = (await session.execute(select(FriendRequest))).scalars().all()
    friendships = (await session.execute(select(Friendship))).scalars().all()
    pairs = {(f.user_low_id, f.user_high_id) for f in friendships}
    for r in requests:
        if r.requester_id == r.target_id:
            problems.append(("self request", r))
        elif tuple(Friendship.key(r.requester_id, r.target_id).values()) in pairs:
            problems.append(("request between friends", r))
    for f in friendships:
        if not f.user_low_id < f.user_high_id:
            problems.append(("unordered friendship", f))
    return problems


async def check_graph(fix: bool):
    async with async_session_maker() as session:
        problems = await find_problems(session)
        if not problems:
            print("Friend graph OK.")
            return
        for label, row in problems:
            if isinstance(row, FriendRequest):
                print(f"- {label}: {row.requester_id} -> {row.target_id}")
            else:
                print(f"- {label}: {row.user_low_id} <-> {row.user_high_id}")
        if fix:
            for label, row in problems:
                if isinstance(row, FriendRequest):
                    await session.execute(
                        delete(FriendRequest).where(
                            and_(FriendRequest.requester_id == row.requester_id, FriendRequest.target_id == row.target_id)
                        )
                    )
            await session.commit()
            print("Removed invalid friend requests.")

if __name__ == "__main__":
    asyncio.run(check_graph("--fix" in sys.argv))
