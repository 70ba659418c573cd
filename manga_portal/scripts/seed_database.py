"""
Наполняет базу данных тестовыми пользователями, жанрами, мангой и главами.

    manga-portal-seed [--data path/to/seed_data.json] [--admin-email admin@example.com]
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Optional

from fastapi_users.password import PasswordHelper
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.database import close_db_connection, get_db_session, init_db
from manga_portal.core.logger_config import logger
from manga_portal.models import Manga, User, UserRole
from manga_portal.repositories.manga_repository import MangaRepository
from manga_portal.schemas.manga import ChapterCreate, MangaCreate

DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "seed_data.json"

password_helper = PasswordHelper()


async def seed_users(db: AsyncSession, users: list) -> None:
    for user_data in users:
        try:
            db.add(
                User(
                    email=user_data["email"],
                    username=user_data["username"],
                    hashed_password=password_helper.hash(user_data["password"]),
                    role=UserRole.ADMIN if user_data.get("admin") else UserRole.USER,
                    is_superuser=bool(user_data.get("admin")),
                )
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info(f"User {user_data['email']} already exists")


async def seed_mangas(db: AsyncSession, mangas: list) -> None:
    repository = MangaRepository(db)
    for manga_data in mangas:
        chapters = manga_data.pop("chapters", [])
        try:
            payload = MangaCreate.model_validate(manga_data)
        except ValidationError as e:
            logger.warning(f"Skipping manga '{manga_data.get('title', 'Unknown')}': {e}")
            continue

        existing = await db.execute(select(Manga.id).where(Manga.title == payload.title))
        if existing.scalar_one_or_none() is not None:
            logger.info(f"Manga '{payload.title}' already exists")
            continue

        try:
            manga = await repository.create(payload)
            for chapter_data in chapters:
                await repository.add_chapter(manga.id, ChapterCreate.model_validate(chapter_data))
            await db.commit()
            logger.info(f"Manga '{payload.title}' created with {len(chapters)} chapters")
        except (IntegrityError, ValidationError) as e:
            await db.rollback()
            logger.warning(f"Could not create manga '{payload.title}': {e}")


async def promote_admin(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning(f"User {email} not found, nobody promoted")
        return False
    user.role = UserRole.ADMIN
    user.is_superuser = True
    await db.commit()
    logger.info(f"User {email} promoted to admin")
    return True


async def seed_database(data_file: Path = DEFAULT_DATA_FILE, admin_email: Optional[str] = None) -> None:
    if not data_file.exists():
        logger.error(f"Seed file {data_file} not found")
        return

    with open(data_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    await init_db()
    try:
        async with get_db_session() as db:
            await seed_users(db, data.get("users", []))
            await seed_mangas(db, data.get("mangas", []))
            if admin_email:
                await promote_admin(db, admin_email)
        logger.info("Database seeded")
    finally:
        await close_db_connection()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the Manga Portal database")
    parser.add_argument("--data", type=Path, default=DEFAULT_DATA_FILE, help="JSON file with seed data")
    parser.add_argument("--admin-email", help="Promote this registered user to admin")
    args = parser.parse_args()
    asyncio.run(seed_database(args.data, args.admin_email))


if __name__ == "__main__":
    main()
