# tests/test_api.py
import tempfile
import unittest
import uuid

from fastapi.testclient import TestClient

from wardrobe_project.core.ai_provider import COLORS_PROMPT, NAME_PROMPT, OCCASION_PROMPT, SEASON_PROMPT, TYPE_PROMPT
from wardrobe_project.core.object_store import LocalObjectStore
from wardrobe_project.core.resources import AppResources
from wardrobe_project.core.security import create_access_token
from wardrobe_project.main import create_app

from support import FakeProvider, make_image_bytes, make_settings

API = "/api/v1"

SHIRT_ANSWERS = {
    COLORS_PROMPT: '["White"]',
    TYPE_PROMPT: "TOP",
    OCCASION_PROMPT: "WORK",
    SEASON_PROMPT: "ALL_SEASON",
    NAME_PROMPT: "White Oxford Shirt",
}


class ApiTestCase(unittest.TestCase):

    provider = None
    settings_overrides = {}

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        settings = make_settings(UPLOAD_DIR=self._tmp.name, AUTO_CREATE_TABLES=True, **self.settings_overrides)
        resources = AppResources(
            settings,
            provider=self.provider,
            object_store=LocalObjectStore(self._tmp.name, settings.UPLOAD_URL_PREFIX),
        )
        self.client = TestClient(create_app(settings, resources))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)
        self._tmp.cleanup()

    def register_and_login(self, email="alex@example.com", password="password123"):
        response = self.client.post(f"{API}/auth/register", json={"email": email, "password": password, "name": "Alex"})
        self.assertEqual(response.status_code, 201, response.text)
        response = self.client.post(f"{API}/auth/login", json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    def create_item(self, headers, name, garment_type):
        response = self.client.post(f"{API}/items", headers=headers, json={
            "name": name, "type": garment_type, "colors": ["Black"],
            "filename": f"{name}.jpg", "object_url": f"/uploads/{name}.jpg",
        })
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestAuthApi(ApiTestCase):

    def test_register_login_and_me(self):
        headers = self.register_and_login()
        response = self.client.get(f"{API}/users/me", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "alex@example.com")
        self.assertNotIn("hashed_password", response.json())

    def test_duplicate_registration_conflicts(self):
        self.register_and_login()
        response = self.client.post(f"{API}/auth/register", json={"email": "ALEX@example.com", "password": "password123"})
        self.assertEqual(response.status_code, 409)

    def test_bad_login(self):
        self.register_and_login()
        response = self.client.post(f"{API}/auth/login", json={"email": "alex@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)

    def test_protected_routes_require_token(self):
        self.assertEqual(self.client.get(f"{API}/items").status_code, 401)
        self.assertEqual(
            self.client.get(f"{API}/items", headers={"Authorization": "Bearer not-a-jwt"}).status_code, 401
        )

    def test_user_listing_is_admin_only(self):
        headers = self.register_and_login()
        self.assertEqual(self.client.get(f"{API}/users", headers=headers).status_code, 403)


class TestItemsApi(ApiTestCase):

    provider = FakeProvider(image_answers=SHIRT_ANSWERS)

    def test_upload_then_list(self):
        headers = self.register_and_login()
        response = self.client.post(
            f"{API}/upload",
            headers=headers,
            files={"file": ("office shirt.png", make_image_bytes(fmt="PNG"), "image/png")},
            data={"season": "SPRING"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["item"]["name"], "White Oxford Shirt")
        self.assertEqual(body["item"]["type"], "TOP")
        self.assertEqual(body["item"]["season"], "SPRING")
        self.assertEqual(body["ai_analysis"]["season"], "ALL_SEASON")

        thumbnail = self.client.get(body["item"]["thumbnail_url"])
        self.assertEqual(thumbnail.status_code, 200)

        listed = self.client.get(f"{API}/items", headers=headers).json()
        self.assertEqual([i["id"] for i in listed], [body["item"]["id"]])

    def test_upload_without_file_is_rejected(self):
        headers = self.register_and_login()
        response = self.client.post(f"{API}/upload", headers=headers, data={"name": "Nothing"})
        self.assertEqual(response.status_code, 400)

    def test_laundry_cycle_and_history(self):
        headers = self.register_and_login()
        item = self.create_item(headers, "Jeans", "BOTTOM")

        response = self.client.post(f"{API}/items/{item['id']}/laundry", headers=headers, json={"action": "mark_worn"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["usage_count"], 1)

        response = self.client.post(f"{API}/items/{item['id']}/laundry", headers=headers, json={"action": "mark_laundry"})
        self.assertEqual(response.json()["laundry_status"], "IN_LAUNDRY")

        invalid = self.client.post(f"{API}/items/{item['id']}/laundry", headers=headers, json={"action": "burn"})
        self.assertEqual(invalid.status_code, 422)

        detail = self.client.get(f"{API}/items/{item['id']}", headers=headers).json()
        self.assertEqual({h["action"] for h in detail["history"]}, {"CREATED", "WORN", "MARKED_LAUNDRY"})

        filtered = self.client.get(f"{API}/items", headers=headers, params={"laundry_status": "IN_LAUNDRY"}).json()
        self.assertEqual([i["id"] for i in filtered], [item["id"]])

    def test_not_found_versus_forbidden(self):
        owner = self.register_and_login()
        intruder = self.register_and_login("sam@example.com")
        item = self.create_item(owner, "Scarf", "ACCESSORY")

        self.assertEqual(self.client.get(f"{API}/items/{uuid.uuid4()}", headers=owner).status_code, 404)
        self.assertEqual(self.client.get(f"{API}/items/{item['id']}", headers=intruder).status_code, 403)
        self.assertEqual(self.client.delete(f"{API}/items/{item['id']}", headers=intruder).status_code, 403)
        self.assertEqual(self.client.delete(f"{API}/items/{uuid.uuid4()}", headers=owner).status_code, 404)
        self.assertEqual(
            self.client.put(f"{API}/items/{item['id']}", headers=intruder, json={"name": "Mine"}).status_code, 403
        )

        self.assertEqual(self.client.delete(f"{API}/items/{item['id']}", headers=owner).status_code, 204)
        self.assertEqual(self.client.get(f"{API}/items/{item['id']}", headers=owner).status_code, 404)

    def test_outfit_crud(self):
        headers = self.register_and_login()
        top = self.create_item(headers, "Tee", "TOP")
        bottom = self.create_item(headers, "Shorts", "BOTTOM")

        response = self.client.post(f"{API}/outfits", headers=headers, json={
            "name": "Weekend", "items": [{"item_id": top["id"], "position": 0}, {"item_id": bottom["id"], "position": 1}],
        })
        self.assertEqual(response.status_code, 201, response.text)
        outfit = response.json()
        self.assertEqual([ref["item_id"] for ref in outfit["items"]], [top["id"], bottom["id"]])

        self.assertEqual(len(self.client.get(f"{API}/outfits", headers=headers).json()), 1)
        self.assertEqual(self.client.delete(f"{API}/outfits/{outfit['id']}", headers=headers).status_code, 204)
        self.assertEqual(self.client.get(f"{API}/outfits/{outfit['id']}", headers=headers).status_code, 404)


class TestSuggestionsAndAnalyticsApi(ApiTestCase):

    def test_suggestions_without_provider_use_fallback(self):
        headers = self.register_and_login()
        self.assertEqual(self.client.post(f"{API}/outfits/suggest", headers=headers).status_code, 400)

        top = self.create_item(headers, "Tee", "TOP")
        bottom = self.create_item(headers, "Jeans", "BOTTOM")
        response = self.client.post(f"{API}/outfits/suggest", headers=headers, json={"occasion": "CASUAL"})

        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertTrue(body["fallback"])
        self.assertEqual(body["suggestions"][0]["item_ids"], [top["id"], bottom["id"]])

    def test_analytics(self):
        headers = self.register_and_login()
        item = self.create_item(headers, "Tee", "TOP")
        self.create_item(headers, "Jeans", "BOTTOM")
        self.client.post(f"{API}/items/{item['id']}/laundry", headers=headers, json={"action": "mark_worn"})

        response = self.client.get(f"{API}/analytics", headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["summary"]["total_items"], 2)
        self.assertEqual(body["summary"]["total_usage"], 1)
        self.assertEqual([i["id"] for i in body["most_worn"]], [item["id"]])
        self.assertEqual(body["distributions"]["by_type"], {"TOP": 1, "BOTTOM": 1})
        self.assertEqual(body["recent_activity"]["action_counts"]["CREATED"], 2)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertIsNone(response.json()["ai_provider"])


class TestAppSecretApi(ApiTestCase):

    settings_overrides = {"SECRET_KEY": "secret-for-this-app-only"}

    def test_tokens_use_the_app_secret(self):
        headers = self.register_and_login()
        self.assertEqual(self.client.get(f"{API}/users/me", headers=headers).status_code, 200)

        foreign = create_access_token({"sub": "alex@example.com"}, settings=make_settings(SECRET_KEY="some-other-secret"))
        response = self.client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {foreign}"})
        self.assertEqual(response.status_code, 401)


class TestDatabaseUnavailableApi(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        settings = make_settings(
            DATABASE_URL=f"sqlite+aiosqlite:///{self._tmp.name}/missing-dir/wardrobe.db",
            AUTO_CREATE_TABLES=False,
            UPLOAD_DIR=self._tmp.name,
        )
        self.client = TestClient(create_app(settings, AppResources(settings, provider=None)))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)
        self._tmp.cleanup()

    def test_database_backed_route_returns_503(self):
        response = self.client.post(f"{API}/auth/register", json={"email": "alex@example.com", "password": "password123"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "Database is temporarily unavailable.")

    def test_health_reports_degraded(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {"status": "degraded", "database": "unavailable"})


if __name__ == "__main__":
    unittest.main()
