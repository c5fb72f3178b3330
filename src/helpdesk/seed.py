"""
Seed Data

Default departments and one account per role for a fresh database.
Rows that already exist are left untouched.
"""
import asyncio
import logging
import os

from .config import Config
from .models.user import UserRole
from .services.engine_service import EngineService

logger = logging.getLogger("helpdesk.seed")

DEFAULT_DEPARTMENTS = [
    ("IT Support", ["laptop", "password", "network", "software", "hardware", "vpn"]),
    ("Human Resources", ["leave", "vacation", "payroll", "benefits", "onboarding"]),
    ("Finance", ["expense", "reimbursement", "invoice", "budget", "travel"]),
    ("Facilities", ["office", "desk", "parking", "maintenance", "access card"]),
]

# (email, name, role, department name or None)
DEFAULT_USERS = [
    ("admin@helpdesk.local", "Admin User", UserRole.ADMIN, None),
    ("agent@helpdesk.local", "Support Agent", UserRole.AGENT, "IT Support"),
    ("employee@helpdesk.local", "Regular Employee", UserRole.EMPLOYEE, "Human Resources"),
]


async def seed(engine: EngineService, password: str) -> dict:
    """
    Insert default departments and users.

    Returns:
        {"departments": created count, "users": created count}
    """
    created = {"departments": 0, "users": 0}
    departments = {}

    for name, keywords in DEFAULT_DEPARTMENTS:
        department = await engine.department_storage.get_by_name(name)
        if department is None:
            department = await engine.department_service.create_department(name, keywords)
            created["departments"] += 1
        departments[name] = department

    for email, name, role, department_name in DEFAULT_USERS:
        if await engine.user_storage.exists_by_email(email):
            logger.info(f"User {email} already exists, skipping")
            continue
        department = departments.get(department_name)
        await engine.users_service.create_user(
            email=email,
            name=name,
            password=password,
            role=role,
            department_id=department.id if department else None,
        )
        created["users"] += 1

    logger.info(
        f"Seeding done: {created['departments']} departments, {created['users']} users created"
    )
    return created


async def _main():
    engine = EngineService()
    await engine.initialize()
    try:
        await seed(engine, os.getenv("SEED_PASSWORD", "password123"))
    finally:
        await engine.close()


def run():
    """Seed the configured database"""
    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    asyncio.run(_main())


if __name__ == "__main__":
    run()
