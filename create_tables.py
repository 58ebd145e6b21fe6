#!/usr/bin/env python3
"""Create database tables and the default site settings row."""

import asyncio

from app.db.database import async_session_maker, engine, init_db
from app.services.settings_service import settings_service


async def create_tables():
    await init_db()

    async with async_session_maker() as session:
        settings = await settings_service.get_site_settings(session)

    print("=" * 60)
    print("Tables created")
    print(f"Site settings row: {settings.id}")
    print("=" * 60)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_tables())
