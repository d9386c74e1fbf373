# tests/test_ingestion_service.py
import json
import os
import unittest
import tempfile

from fastapi import HTTPException

from wardrobe_project.core.ai_provider import (
    COLORS_PROMPT, NAME_PROMPT, OCCASION_PROMPT, SEASON_PROMPT, TYPE_PROMPT,
)
from wardrobe_project.core.object_store import LocalObjectStore
from wardrobe_project.models.item_models import (
    GarmentType, HistoryAction, LaundryStatus, Occasion, Season, UploadOverrides,
)
from wardrobe_project.services import event_logger_service, history_service, ingestion_service, wardrobe_service

from support import DatabaseTestCase, FakeProvider, make_image_bytes

GOOD_ANSWERS = {
    COLORS_PROMPT: '["Blue", "White"]',
    TYPE_PROMPT: "BOTTOM",
    OCCASION_PROMPT: "WORK",
    SEASON_PROMPT: "FALL",
    NAME_PROMPT: "Blue Denim Jeans",
}


class FlakyTypeProvider(FakeProvider):
    """identify_type itself blows up; the other four answer normally."""

    async def identify_type(self, image, mime_type):
        raise RuntimeError("type classifier crashed")


class TestBuildStorageFilename(unittest.TestCase):

    def test_whitespace_replaced_and_timestamp_prefixed(self):
        self.assertEqual(
            ingestion_service.build_storage_filename("my blue  shirt.jpg", now_ms=1700000000000),
            "1700000000000-my-blue-shirt.jpg",
        )

    def test_directory_components_dropped(self):
        name = ingestion_service.build_storage_filename("../../etc/passwd")
        self.assertRegex(name, r"^\d+-passwd$")

    def test_missing_name(self):
        self.assertRegex(ingestion_service.build_storage_filename(None), r"^\d+-upload$")


class TestIngestUpload(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LocalObjectStore(self._tmp.name, "/uploads")
        self.user = await self.create_user()

    async def asyncTearDown(self):
        self._tmp.cleanup()
        await super().asyncTearDown()

    async def ingest(self, provider, data=None, filename="blue jeans.png", content_type="image/png", overrides=None):
        return await ingestion_service.ingest_upload(
            self.db, provider, self.store, self.user.id,
            filename=filename,
            content_type=content_type,
            data=data if data is not None else make_image_bytes(fmt="PNG"),
            overrides=overrides,
            ip_address="10.0.0.1",
        )

    async def test_ai_classification_is_applied(self):
        provider = FakeProvider(image_answers=GOOD_ANSWERS)
        result = await self.ingest(provider)

        self.assertTrue(result.success)
        item = result.item
        self.assertEqual(item.name, "Blue Denim Jeans")
        self.assertEqual(item.colors, ["Blue", "White"])
        self.assertEqual(item.type, GarmentType.BOTTOM)
        self.assertEqual(item.occasion, Occasion.WORK)
        self.assertEqual(item.occasions, [Occasion.WORK])
        self.assertEqual(item.season, Season.FALL)
        self.assertEqual(len(provider.image_calls), 5)
        self.assertEqual(result.ai_analysis.type, GarmentType.BOTTOM)

    async def test_new_item_starts_unused_and_not_favorite(self):
        result = await self.ingest(FakeProvider(image_answers=GOOD_ANSWERS))

        stored = await wardrobe_service.get_item_by_id(self.db, result.item.id)
        self.assertEqual(stored.usage_count, 0)
        self.assertFalse(stored.is_favorite)
        self.assertEqual(stored.laundry_status, LaundryStatus.IN_WARDROBE)
        self.assertFalse(stored.moderated)

    async def test_files_stored_with_thumbnail(self):
        result = await self.ingest(FakeProvider(image_answers=GOOD_ANSWERS))

        self.assertRegex(result.item.filename, r"^\d+-blue-jeans\.png$")
        self.assertEqual(result.item.object_url, f"/uploads/{result.item.filename}")
        self.assertEqual(result.item.thumbnail_url, f"/uploads/thumb-{result.item.filename}")
        self.assertTrue(os.path.exists(os.path.join(self._tmp.name, result.item.filename)))
        self.assertTrue(os.path.exists(os.path.join(self._tmp.name, f"thumb-{result.item.filename}")))

    async def test_form_values_win_over_ai(self):
        overrides = UploadOverrides(name="Work Trousers", type=GarmentType.BOTTOM, season=Season.WINTER)
        answers = dict(GOOD_ANSWERS, **{TYPE_PROMPT: "TOP", SEASON_PROMPT: "SUMMER"})
        result = await self.ingest(FakeProvider(image_answers=answers), overrides=overrides)

        self.assertEqual(result.item.name, "Work Trousers")
        self.assertEqual(result.item.type, GarmentType.BOTTOM)
        self.assertEqual(result.item.season, Season.WINTER)
        self.assertEqual(result.item.occasion, Occasion.WORK)
        # The analysis still reports what the AI said
        self.assertEqual(result.ai_analysis.type, GarmentType.TOP)

    async def test_corrupt_file_still_creates_item_with_defaults(self):
        data = b"%PDF-1.4 not an image at all"
        result = await self.ingest(None, data=data, filename="scan.pdf", content_type="application/pdf")

        item = result.item
        self.assertEqual(item.name, "Untitled Item")
        self.assertEqual(item.type, GarmentType.TOP)
        self.assertEqual(item.occasion, Occasion.CASUAL)
        self.assertEqual(item.season, Season.ALL_SEASON)
        self.assertEqual(item.colors, ["Unknown"])
        with open(os.path.join(self._tmp.name, item.filename), "rb") as f:
            self.assertEqual(f.read(), data)

    async def test_failing_provider_yields_defaults(self):
        provider = FakeProvider(image_error=RuntimeError("provider down"))
        result = await self.ingest(provider)

        self.assertEqual(result.item.name, "Clothing Item")
        self.assertEqual(result.item.type, GarmentType.TOP)
        self.assertEqual(result.item.colors, ["Unknown"])

    async def test_one_failed_call_does_not_affect_the_others(self):
        result = await self.ingest(FlakyTypeProvider(image_answers=GOOD_ANSWERS))

        self.assertEqual(result.ai_analysis.type, GarmentType.TOP)
        self.assertEqual(result.ai_analysis.name, "Blue Denim Jeans")
        self.assertEqual(result.ai_analysis.colors, ["Blue", "White"])
        self.assertEqual(result.ai_analysis.season, Season.FALL)

    async def test_history_and_audit_written(self):
        result = await self.ingest(FakeProvider(image_answers=GOOD_ANSWERS))

        history = await history_service.get_history_for_item(self.db, result.item.id)
        self.assertEqual([h.action for h in history], [HistoryAction.CREATED])

        logs = await event_logger_service.get_audit_logs_for_user(self.db, self.user.id)
        upload_log = next(log for log in logs if log.action == "UPLOAD_ITEM")
        payload = json.loads(upload_log.payload)
        self.assertEqual(payload["itemId"], str(result.item.id))
        self.assertEqual(payload["filename"], result.item.filename)
        self.assertEqual(payload["aiAnalysis"]["type"], "BOTTOM")
        self.assertEqual(upload_log.ip_address, "10.0.0.1")

    async def test_empty_file_rejected(self):
        with self.assertRaises(HTTPException) as cm:
            await self.ingest(None, data=b"")
        self.assertEqual(cm.exception.status_code, 400)

    async def test_oversized_file_rejected(self):
        with self.assertRaises(HTTPException) as cm:
            await ingestion_service.ingest_upload(
                self.db, None, self.store, self.user.id, "big.jpg", "image/jpeg", b"x" * 2048,
                max_size_bytes=1024,
            )
        self.assertEqual(cm.exception.status_code, 413)
        self.assertEqual(os.listdir(self._tmp.name), [])
