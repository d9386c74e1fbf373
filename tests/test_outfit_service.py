# tests/test_outfit_service.py
import uuid

from fastapi import HTTPException

from wardrobe_project.models.item_models import GarmentType
from wardrobe_project.models.outfit_models import Outfit, OutfitCreate, OutfitItemRef, OutfitUpdate
from wardrobe_project.services import event_logger_service, outfit_service, wardrobe_service

from support import DatabaseTestCase


class TestOutfitService(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.owner = await self.create_user()
        self.other = await self.create_user("other@example.com")
        self.top = await self.create_item(self.owner, name="Oxford Shirt", type=GarmentType.TOP)
        self.bottom = await self.create_item(self.owner, name="Chinos", type=GarmentType.BOTTOM)

    async def create(self, **fields):
        values = dict(
            name="Office",
            items=[OutfitItemRef(item_id=self.top.id, position=0), OutfitItemRef(item_id=self.bottom.id, position=1)],
        )
        values.update(fields)
        return await outfit_service.create_outfit(self.db, self.owner.id, OutfitCreate(**values))

    async def test_create_and_serialize(self):
        outfit = await self.create(description="Weekday look")
        schema = Outfit.model_validate(outfit)

        self.assertEqual(schema.name, "Office")
        self.assertEqual(schema.description, "Weekday look")
        self.assertEqual([ref.item_id for ref in schema.items], [self.top.id, self.bottom.id])
        self.assertEqual([ref.position for ref in schema.items], [0, 1])

        logs = await event_logger_service.get_audit_logs_for_user(self.db, self.owner.id)
        self.assertIn("CREATE_OUTFIT", {log.action for log in logs})

    async def test_foreign_item_is_rejected(self):
        foreign = await self.create_item(self.other, name="Not Yours")
        with self.assertRaises(HTTPException) as cm:
            await self.create(items=[OutfitItemRef(item_id=foreign.id)])
        self.assertEqual(cm.exception.status_code, 400)

    async def test_unknown_item_is_rejected(self):
        with self.assertRaises(HTTPException) as cm:
            await self.create(items=[OutfitItemRef(item_id=uuid.uuid4())])
        self.assertEqual(cm.exception.status_code, 400)

    async def test_list_is_scoped_to_owner(self):
        await self.create()
        self.assertEqual(len(await outfit_service.list_outfits_for_user(self.db, self.owner.id)), 1)
        self.assertEqual(await outfit_service.list_outfits_for_user(self.db, self.other.id), [])

    async def test_access_rules(self):
        outfit = await self.create()
        self.assertIsNone(await outfit_service.get_outfit_for_owner(self.db, uuid.uuid4(), self.owner.id))
        with self.assertRaises(HTTPException) as cm:
            await outfit_service.get_outfit_for_owner(self.db, outfit.id, self.other.id)
        self.assertEqual(cm.exception.status_code, 403)
        with self.assertRaises(HTTPException) as cm:
            await outfit_service.delete_outfit_for_user(self.db, outfit.id, self.other.id)
        self.assertEqual(cm.exception.status_code, 403)

    async def test_update_replaces_items(self):
        outfit = await self.create()
        updated = await outfit_service.update_outfit_for_user(
            self.db, outfit.id, self.owner.id,
            OutfitUpdate(name="Casual Friday", items=[OutfitItemRef(item_id=self.bottom.id, position=0)]),
        )

        self.assertEqual(updated.name, "Casual Friday")
        self.assertEqual([ref.item_id for ref in updated.items], [self.bottom.id])

    async def test_update_missing_returns_none(self):
        result = await outfit_service.update_outfit_for_user(self.db, uuid.uuid4(), self.owner.id, OutfitUpdate(name="x"))
        self.assertIsNone(result)

    async def test_delete(self):
        outfit = await self.create()
        self.assertTrue(await outfit_service.delete_outfit_for_user(self.db, outfit.id, self.owner.id))
        self.assertIsNone(await outfit_service.get_outfit_by_id(self.db, outfit.id))
        self.assertFalse(await outfit_service.delete_outfit_for_user(self.db, outfit.id, self.owner.id))

    async def test_deleting_an_item_removes_it_from_outfits(self):
        outfit = await self.create()
        outfit_id, bottom_id = outfit.id, self.bottom.id
        await wardrobe_service.delete_item_for_user(self.db, self.top.id, self.owner.id)

        self.db.expire_all()
        refreshed = await outfit_service.get_outfit_by_id(self.db, outfit_id)
        self.assertEqual([ref.item_id for ref in refreshed.items], [bottom_id])
