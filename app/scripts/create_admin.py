import asyncio
import os

from app.core.db import AsyncSessionLocal
from app.core.security import hash_password
from app.models.users.user_models import Company, User


async def create_admin():
    async with AsyncSessionLocal() as session:
        company = Company(
            name=os.getenv("COMPANY_NAME", "Default Company"),
            email=os.getenv("ADMIN_EMAIL", "admin@example.com"),
        )
        session.add(company)
        await session.flush()

        admin = User(
            company_id=company.id,
            username=os.getenv("ADMIN_EMAIL", "admin@example.com"),
            password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "admin123")),
            role="admin",
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        print(f"Admin user created for company {company.name}!")


if __name__ == "__main__":
    asyncio.run(create_admin())
