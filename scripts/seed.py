"""Seed script to populate database with sample data."""

import asyncio
import sys

sys.path.insert(0, ".")

from sqlalchemy import select

from app.db import get_db_context, init_db
from app.models import PlanRole, User
from app.services.members import MemberService
from app.services.password import hash_password
from app.services.plans import PlanService


async def seed_database():
    """Seed the database with sample data."""
    await init_db()

    async with get_db_context() as session:
        # Check if already seeded
        existing = await session.execute(select(User).limit(1))
        if existing.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        print("Seeding database...")

        # Create demo users
        alice = User(
            email="alice@example.com",
            display_name="Alice Johnson",
            hashed_password=hash_password("password123"),
        )
        bob = User(
            email="bob@example.com",
            display_name="Bob Smith",
            hashed_password=hash_password("password123"),
        )
        carol = User(
            email="carol@example.com",
            display_name="Carol Williams",
            hashed_password=hash_password("password123"),
        )

        session.add_all([alice, bob, carol])
        await session.commit()
        print(f"Created users: {alice.email}, {bob.email}, {carol.email}")

        # Create plan
        plan = await PlanService(session).create(
            "Summer road trip",
            "Route, bookings and packing list",
            alice.id,
        )
        print(f"Created plan: {plan.title}")

        # Share it
        members = MemberService(session)
        await members.invite(plan.id, bob.email, PlanRole.EDITOR, invited_by=alice.id)
        await members.invite(plan.id, carol.email, PlanRole.VIEWER, invited_by=alice.id)
        await members.invite(plan.id, "dave@example.com", PlanRole.VIEWER, invited_by=alice.id)
        print("Added plan members and a pending invitation")

        print("\n✅ Database seeded successfully!")
        print("\nDemo accounts:")
        print("  Email: alice@example.com  Password: password123 (owner)")
        print("  Email: bob@example.com    Password: password123 (editor)")
        print("  Email: carol@example.com  Password: password123 (viewer)")
        print("\nRegister dave@example.com to accept the pending viewer invitation.")


if __name__ == "__main__":
    asyncio.run(seed_database())
