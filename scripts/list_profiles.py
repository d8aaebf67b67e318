import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from moodfeed.db.session import async_session_maker
from moodfeed.models.user import Profile, User

async def list_profiles():
    async with async_session_maker() as session:
        result = await session.execute(
            select(User.email, Profile.handle, Profile.region, Profile.settings).join(Profile, Profile.id == User.id)
        )
        rows = result.all()
        if not rows:
            print("No profiles found in database.")
        else:
            print("Current Profiles:")
            for email, handle, region, settings in rows:
                private = (settings or {}).get("private_account", True)
                print(f"- {handle} ({email}) | Region: {region} | Private: {private}")

if __name__ == "__main__":
    asyncio.run(list_profiles())
