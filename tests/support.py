# tests/support.py
import io
import unittest
from typing import Dict, List, Optional

from PIL import Image

from config.settings import Settings
from wardrobe_project.core.ai_provider import ClassificationProvider
from wardrobe_project.db.database import build_engine, build_session_factory, create_tables
from wardrobe_project.models.item_models import GarmentType, ItemCreate, Occasion, Season
from wardrobe_project.models.user_models import UserCreate
from wardrobe_project.services import user_service, wardrobe_service

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_settings(**overrides) -> Settings:
    values = dict(
        DATABASE_URL=TEST_DATABASE_URL,
        GOOGLE_GEMINI_API_KEY=None,
        S3_BUCKET=None,
        AI_RETRY_BASE_DELAY=0.0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_image_bytes(size=(1600, 900), color=(20, 60, 160), fmt="JPEG", mode="RGB") -> bytes:
    output = io.BytesIO()
    Image.new(mode, size, color).save(output, format=fmt)
    return output.getvalue()


class FakeProvider(ClassificationProvider):
    """Answers image prompts from a prompt -> text map and records every call."""

    name = "fake"

    def __init__(
        self,
        image_answers: Optional[Dict[str, str]] = None,
        text_answer: Optional[str] = None,
        image_error: Optional[Exception] = None,
        text_error: Optional[Exception] = None,
    ):
        self.image_answers = image_answers or {}
        self.text_answer = text_answer
        self.image_error = image_error
        self.text_error = text_error
        self.image_calls: List[str] = []
        self.text_calls: List[str] = []

    async def complete_with_image(self, prompt: str, image: bytes, mime_type: str) -> str:
        self.image_calls.append(prompt)
        if self.image_error:
            raise self.image_error
        return self.image_answers.get(prompt, "")

    async def generate_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        if self.text_error:
            raise self.text_error
        return self.text_answer or ""


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh in-memory database and session per test."""

    async def asyncSetUp(self):
        self.engine = build_engine(TEST_DATABASE_URL)
        await create_tables(self.engine)
        self.session_factory = build_session_factory(self.engine)
        self.db = self.session_factory()

    async def asyncTearDown(self):
        await self.db.close()
        await self.engine.dispose()

    async def create_user(self, email: str = "owner@example.com", password: str = "password123"):
        return await user_service.create_user_in_db(self.db, UserCreate(email=email, password=password))

    async def create_item(self, user, name: str = "Test Item", type: GarmentType = GarmentType.TOP, **fields):
        values = dict(
            name=name,
            type=type,
            colors=["Blue"],
            occasion=Occasion.CASUAL,
            season=Season.ALL_SEASON,
            filename=f"{name.replace(' ', '-')}.jpg",
            object_url=f"/uploads/{name.replace(' ', '-')}.jpg",
        )
        values.update(fields)
        return await wardrobe_service.create_item(self.db, user.id, ItemCreate(**values))
