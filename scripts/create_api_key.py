"""Script to issue an API key for a user."""

import argparse
import asyncio
import sys

sys.path.insert(0, ".")

from stt_service.auth.security import create_api_key
from stt_service.db.session import async_session_maker, init_db


async def main(owner: str, name: str, expires_in_days: int | None):
    """Create an API key acting as ``owner``."""
    print("Initializing database...")
    await init_db()

    print(f"Creating API key for {owner}...")
    async with async_session_maker() as db:
        api_key, full_key = await create_api_key(
            db,
            name=name,
            owner=owner,
            expires_in_days=expires_in_days,
        )
        await db.commit()

        print("\n" + "=" * 60)
        print("API KEY CREATED SUCCESSFULLY")
        print("=" * 60)
        print(f"\nAPI Key: {full_key}")
        print(f"Key ID:  {api_key.id}")
        print(f"Prefix:  {api_key.key_prefix}")
        print(f"Owner:   {api_key.owner}")
        print("\nSAVE THIS KEY NOW - IT WILL NOT BE SHOWN AGAIN!")
        print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("owner", help="User identifier the key acts as")
    parser.add_argument("--name", default="CLI Key")
    parser.add_argument("--expires-in-days", type=int, default=None)
    args = parser.parse_args()

    asyncio.run(main(args.owner, args.name, args.expires_in_days))
