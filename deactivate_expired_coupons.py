#!/usr/bin/env python3
"""Deactivate coupons whose expiry date has passed. Meant for a daily cron."""

import asyncio

from app.db.database import async_session_maker, engine
from app.services.coupon_service import coupon_service


async def deactivate_expired_coupons():
    """Run the expiry sweep once."""
    async with async_session_maker() as session:
        count = await coupon_service.deactivate_expired_coupons(session)

    print(f"Deactivated {count} expired coupon(s)")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(deactivate_expired_coupons())
