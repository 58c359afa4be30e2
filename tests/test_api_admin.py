import asyncio
import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from api_keys import service as api_keys_service
from auth import dependencies as auth_dependencies
from auth import security
from main import app

ADMIN = {"id": 1, "email": "admin@example.com", "role": "admin", "is_active": True}
CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)


class CategoryApiTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[auth_dependencies.require_admin] = lambda: ADMIN
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_create_derives_slug_from_name(self):
        row = {"id": 1, "name": "Coffee Shops", "slug": "coffee-shops"}
        with patch("categories.repository.slug_taken", new=AsyncMock(return_value=False)), patch(
            "categories.repository.create_category", new=AsyncMock(return_value=row)
        ) as create_category:
            response = self.client.post("/api/categories", json={"name": "Coffee Shops"})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(create_category.await_args.kwargs["slug"], "coffee-shops")

    def test_create_duplicate_slug(self):
        with patch("categories.repository.slug_taken", new=AsyncMock(return_value=True)):
            response = self.client.post("/api/categories", json={"name": "Coffee Shops"})
        self.assertEqual(response.status_code, 400)

    def test_rename_regenerates_slug(self):
        current = {"id": 2, "name": "Cafes", "slug": "cafes"}
        with patch("categories.repository.get_category", new=AsyncMock(return_value=current)), patch(
            "categories.repository.slug_taken", new=AsyncMock(return_value=False)
        ), patch(
            "categories.repository.update_category", new=AsyncMock(return_value=current)
        ) as update_category:
            response = self.client.put("/api/categories/2", json={"name": "Coffee Bars"})

        self.assertEqual(response.status_code, 200)
        update_category.assert_awaited_once_with(2, {"name": "Coffee Bars", "slug": "coffee-bars"})

    def test_update_ignores_null_for_required_columns(self):
        current = {"id": 2, "name": "Cafes", "slug": "cafes"}
        with patch("categories.repository.get_category", new=AsyncMock(return_value=current)), patch(
            "categories.repository.update_category", new=AsyncMock(return_value=current)
        ) as update_category:
            response = self.client.put(
                "/api/categories/2",
                json={"name": None, "is_active": None, "description": None},
            )

        self.assertEqual(response.status_code, 200)
        update_category.assert_awaited_once_with(2, {"description": None})

    def test_create_with_missing_parent(self):
        with patch("categories.repository.slug_taken", new=AsyncMock(return_value=False)), patch(
            "categories.repository.get_category", new=AsyncMock(return_value=None)
        ), patch("categories.repository.create_category", new=AsyncMock()) as create_category:
            response = self.client.post("/api/categories", json={"name": "Food", "parent_id": 999})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Parent category does not exist.")
        create_category.assert_not_awaited()

    def test_update_with_missing_parent(self):
        current = {"id": 2, "name": "Cafes", "slug": "cafes"}
        lookup = AsyncMock(side_effect=lambda category_id: current if category_id == 2 else None)
        with patch("categories.repository.get_category", new=lookup), patch(
            "categories.repository.update_category", new=AsyncMock()
        ) as update_category:
            response = self.client.put("/api/categories/2", json={"parent_id": 999})

        self.assertEqual(response.status_code, 400)
        update_category.assert_not_awaited()

    def test_update_rejects_parent_inside_own_subtree(self):
        current = {"id": 2, "name": "Cafes", "slug": "cafes"}
        with patch("categories.repository.get_category", new=AsyncMock(return_value=current)), patch(
            "categories.repository.in_subtree", new=AsyncMock(return_value=True)
        ) as in_subtree, patch("categories.repository.update_category", new=AsyncMock()) as update_category:
            response = self.client.put("/api/categories/2", json={"parent_id": 7})

        self.assertEqual(response.status_code, 400)
        in_subtree.assert_awaited_once_with(2, 7)
        update_category.assert_not_awaited()

    def test_update_rejects_self_parent(self):
        current = {"id": 2, "name": "Cafes", "slug": "cafes"}
        with patch("categories.repository.get_category", new=AsyncMock(return_value=current)):
            response = self.client.put("/api/categories/2", json={"parent_id": 2})
        self.assertEqual(response.status_code, 400)

    def test_delete_blocked_by_children(self):
        with patch("categories.repository.get_category", new=AsyncMock(return_value={"id": 2})), patch(
            "categories.repository.has_children", new=AsyncMock(return_value=True)
        ):
            response = self.client.delete("/api/categories/2")
        self.assertEqual(response.status_code, 400)

    def test_delete_blocked_by_listings(self):
        with patch("categories.repository.get_category", new=AsyncMock(return_value={"id": 2})), patch(
            "categories.repository.has_children", new=AsyncMock(return_value=False)
        ), patch("categories.repository.is_in_use", new=AsyncMock(return_value=True)):
            response = self.client.delete("/api/categories/2")
        self.assertEqual(response.status_code, 400)

    def test_with_counts_route(self):
        rows = [{"id": 1, "name": "Food", "listing_count": 3}]
        with patch("categories.repository.list_categories_with_counts", new=AsyncMock(return_value=rows)):
            response = self.client.get("/api/categories/with-counts")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["listing_count"], 3)

    def test_slug_listings(self):
        category = {"id": 4, "slug": "food"}
        with patch("categories.repository.get_category_by_slug", new=AsyncMock(return_value=category)), patch(
            "categories.repository.list_listings_in_category", new=AsyncMock(return_value=([{"id": 9}], 1))
        ):
            response = self.client.get("/api/categories/slug/food/listings")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["category"], category)
        self.assertEqual(response.json()["pagination"]["totalItems"], 1)

    def test_associate_primary(self):
        with patch("categories.repository.listing_exists", new=AsyncMock(return_value=True)), patch(
            "categories.repository.get_category", new=AsyncMock(return_value={"id": 4})
        ), patch("categories.repository.associate", new=AsyncMock()) as associate:
            response = self.client.post(
                "/api/listing-categories",
                json={"listing_id": 9, "category_id": 4, "is_primary": True},
            )
        self.assertEqual(response.status_code, 201)
        associate.assert_awaited_once_with(9, 4, is_primary=True)

    def test_dissociate_missing_link(self):
        with patch("categories.repository.dissociate", new=AsyncMock(return_value=False)):
            response = self.client.delete("/api/listings/9/categories/4")
        self.assertEqual(response.status_code, 404)


class ApiKeyTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[auth_dependencies.require_admin] = lambda: ADMIN
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_mask_key(self):
        self.assertEqual(api_keys_service.mask_key("sk-abcdef1234"), "*********1234")
        self.assertEqual(api_keys_service.mask_key("abc"), "***")

    def test_get_masks_secret(self):
        row = {"id": 1, "service_name": "openai", "is_active": True, "api_key": "sk-secret-9876"}
        with patch("api_keys.repository.get_by_service", new=AsyncMock(return_value=row)):
            response = self.client.get("/api/api-keys/openai")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["api_key"].endswith("9876"))
        self.assertNotIn("secret", response.json()["api_key"])

    def test_upsert_reports_created(self):
        row = {"id": 1, "service_name": "openai", "is_active": True, "created": True}
        with patch("api_keys.repository.upsert_key", new=AsyncMock(return_value=row)):
            response = self.client.post("/api/api-keys", json={"service_name": "openai", "api_key": "sk-1"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "API key created successfully")
        self.assertNotIn("created", response.json())
        self.assertNotIn("api_key", response.json())

    def test_upsert_requires_key(self):
        response = self.client.post("/api/api-keys", json={"service_name": "openai"})
        self.assertEqual(response.status_code, 400)

    def test_active_key_prefers_database(self):
        with patch("api_keys.repository.get_active_secret", new=AsyncMock(return_value="sk-db")), patch.dict(
            "os.environ", {"OPENAI_API_KEY": "sk-env"}
        ):
            self.assertEqual(self.run_async(api_keys_service.get_active_key("openai")), "sk-db")

    def test_active_key_env_fallback(self):
        with patch("api_keys.repository.get_active_secret", new=AsyncMock(return_value=None)), patch.dict(
            "os.environ", {"OPENAI_API_KEY": "sk-env"}
        ):
            self.assertEqual(self.run_async(api_keys_service.get_active_key("openai")), "sk-env")
            self.assertIsNone(self.run_async(api_keys_service.get_active_key("maps")))

    @staticmethod
    def run_async(coro):
        return asyncio.run(coro)


class UserAdminTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[auth_dependencies.require_admin] = lambda: ADMIN
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_cannot_delete_last_admin(self):
        with patch("users.repository.get_user", new=AsyncMock(return_value=dict(ADMIN))), patch(
            "users.repository.count_admins", new=AsyncMock(return_value=1)
        ):
            response = self.client.delete("/api/users/1")
        self.assertEqual(response.status_code, 400)

    def test_create_rejects_taken_email(self):
        with patch("users.repository.email_taken", new=AsyncMock(return_value=True)):
            response = self.client.post(
                "/api/users",
                json={"name": "Sam", "email": "sam@example.com", "password": "longenough1", "role": "user"},
            )
        self.assertEqual(response.status_code, 400)

    def test_create_rejects_unknown_role(self):
        response = self.client.post(
            "/api/users",
            json={"name": "Sam", "email": "sam@example.com", "password": "longenough1", "role": "owner"},
        )
        self.assertEqual(response.status_code, 400)


class AuthFlowTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_register_issues_tokens_with_role(self):
        user = {
            "id": 5,
            "name": "Rita",
            "email": "rita@example.com",
            "role": "user",
            "is_active": True,
            "created_at": CREATED_AT,
        }
        with patch("auth.repository.get_user_by_email", new=AsyncMock(return_value=None)), patch(
            "auth.repository.create_user", new=AsyncMock(return_value=user)
        ), patch("auth.repository.insert_refresh_token", new=AsyncMock(return_value={"id": 1})):
            response = self.client.post(
                "/auth/register",
                json={"name": "Rita", "email": "rita@example.com", "password": "correct-horse"},
            )

        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload["user"]["role"], "user")
        claims = security.decode_access_token(payload["tokens"]["access_token"])
        self.assertEqual(claims["sub"], "5")
        self.assertEqual(claims["role"], "user")

    def test_register_conflict(self):
        with patch("auth.repository.get_user_by_email", new=AsyncMock(return_value={"id": 5})):
            response = self.client.post(
                "/auth/register",
                json={"name": "Rita", "email": "rita@example.com", "password": "correct-horse"},
            )
        self.assertEqual(response.status_code, 409)

    def test_admin_route_rejects_regular_user_token(self):
        token = security.build_access_token(user_id=5, email="rita@example.com", role="user")
        user = {"id": 5, "email": "rita@example.com", "role": "user", "is_active": True}
        with patch("auth.repository.get_user_by_id", new=AsyncMock(return_value=user)):
            response = self.client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 403)

    def test_role_helpers(self):
        self.assertTrue(security.is_admin({"role": "Admin"}))
        self.assertFalse(security.is_admin({"role": "owner"}))
        self.assertEqual(security.role_of(None), security.ROLE_USER)

    def test_bad_authorization_header(self):
        response = self.client.get("/api/users", headers={"Authorization": "Token abc"})
        self.assertEqual(response.status_code, 401)


class HealthTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_api_health_connected(self):
        with patch("core.db.fetch_val", new=AsyncMock(return_value=CREATED_AT)):
            response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "connected")
        self.assertIn("dbTime", response.json())

    def test_api_health_disconnected_is_still_200(self):
        with patch("core.db.fetch_val", new=AsyncMock(side_effect=RuntimeError("DB pool is not initialized."))):
            response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "disconnected")
        self.assertIn("error", response.json())


if __name__ == "__main__":
    unittest.main()
