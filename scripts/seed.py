#!/usr/bin/env python3
"""Seed the database with a demo user and the starter ingredient catalog.

Safe to run repeatedly: existing rows (matched by email / ingredient name)
are left alone.

Usage:
    python scripts/seed.py
"""
import asyncio
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mealops.auth import hash_password
from mealops.db.engine import async_session, engine
from mealops.db.repository import IngredientRepository, UserRepository
from mealops.db.tables import Base, IngredientRow
from mealops.db.user_tables import UserRow
from mealops.logging_config import setup_logging
from mealops.models import Role

logger = logging.getLogger("seed")

DEMO_EMAIL = "demo@mealops.local"
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "demo-password")

# name, kcal, protein, carbs, fat (per 100 g)
INGREDIENTS = [
    ("Chicken Breast", 165, 31, 0, 3.6),
    ("Rice (white, cooked)", 130, 2.7, 28, 0.3),
    ("Olive Oil", 884, 0, 0, 100),
    ("Egg", 143, 13, 1.1, 9.5),
]


async def seed() -> str:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        users = UserRepository(session)
        user = await users.get_by_email(DEMO_EMAIL)
        if user is None:
            user = await users.add(UserRow(
                email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD), role=Role.USER,
            ))
            logger.info("Created demo user %s", DEMO_EMAIL)

        ingredients = IngredientRepository(session)
        existing = {row.name for row in await ingredients.list_all()}
        added = 0
        for name, kcal, protein, carbs, fat in INGREDIENTS:
            if name in existing:
                continue
            await ingredients.add(IngredientRow(
                name=name,
                kcal_per_100g=kcal,
                protein_per_100g=protein,
                carbs_per_100g=carbs,
                fat_per_100g=fat,
            ))
            added += 1

        await session.commit()
        logger.info("Seeded %d new ingredients (%d already present)", added, len(existing))
        return user.id


async def main() -> int:
    setup_logging()
    user_id = await seed()
    logger.info("DEMO_USER_ID: %s", user_id)
    await engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
