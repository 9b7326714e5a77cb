#!/usr/bin/env python3
"""
Create the initial superuser and, optionally, sample NGO/volunteer accounts.
Run this from the backend directory with the APP_* environment available.

Usage: python seed_data.py [--samples] [--email EMAIL --password PASSWORD]
"""
import argparse
import asyncio

from app.db.core import AsyncSessionLocal, engine
from app.db.seed import seed_initial_data


async def main(args):
    async with AsyncSessionLocal() as session:
        created = await seed_initial_data(
            session,
            superuser_email=args.email,
            superuser_password=args.password,
            with_samples=args.samples,
        )
    await engine.dispose()

    for account, was_created in created.items():
        print(f"{account}: {'created' if was_created else 'already exists'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--email", help="superuser email (defaults to settings)")
    parser.add_argument("--password", help="superuser password (defaults to settings)")
    parser.add_argument(
        "--samples", action="store_true", help="also create sample NGO and volunteer"
    )
    asyncio.run(main(parser.parse_args()))
