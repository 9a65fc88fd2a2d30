"""
Lexicon Backend: Admin Translation Route Tests
==============================================

What:  End-to-end tests for PUT/POST/DELETE /api/admin/translations/*.
How:   Edits land in the temp locales tree from conftest; assertions check
       the response, the JSON file on disk and the in-memory catalog.
"""

import json

import pytest


BASE = "/api/admin/translations"


def read_file(catalog, language, namespace):
    return json.loads(catalog.bundle_path(language, namespace).read_text(encoding="utf-8"))


class TestAdminGates:

    @pytest.mark.asyncio
    async def test_no_token_is_401(self, test_client, catalog):
        response = await test_client.put(
            f"{BASE}/en/common", json={"translations": [{"key": "welcome", "value": "Hi"}]}
        )

        assert response.status_code == 401
        assert read_file(catalog, "en", "common")["welcome"] == "Welcome"

    @pytest.mark.asyncio
    async def test_non_admin_is_403(self, test_client, catalog, user_headers):
        response = await test_client.post(
            f"{BASE}/en/common/add",
            json={"translations": [{"key": "newKey", "value": "New"}]},
            headers=user_headers,
        )

        assert response.status_code == 403
        assert "newKey" not in read_file(catalog, "en", "common")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, path", [
        ("PUT", "/en/common"),
        ("POST", "/en/common/add"),
        ("DELETE", "/en/common/delete"),
    ])
    async def test_no_token_with_malformed_body_is_401(self, test_client, catalog, method, path):
        """The identity gate answers before the body is decoded."""
        response = await test_client.request(
            method,
            f"{BASE}{path}",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert "errors" not in response.json()
        assert read_file(catalog, "en", "common")["welcome"] == "Welcome"

    @pytest.mark.asyncio
    async def test_non_admin_with_malformed_body_is_403(self, test_client, user_headers):
        response = await test_client.put(
            f"{BASE}/en/common",
            content=b"{not json",
            headers={**user_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_with_malformed_json_is_400(self, test_client, admin_headers):
        response = await test_client.put(
            f"{BASE}/en/common",
            content=b"{not json",
            headers={**admin_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["msg"].startswith("Invalid JSON")


class TestUpdateTranslations:

    @pytest.mark.asyncio
    async def test_update_overwrites_and_inserts(self, test_client, catalog, admin_headers):
        response = await test_client.put(
            f"{BASE}/en/common",
            params={"lang": "en"},
            json={"translations": [
                {"key": "welcome", "value": "Hi there"},
                {"key": "newKey", "value": "New"},
            ]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"language": "en", "namespace": "common", "updatedCount": 2}
        assert body["message"] == "translations.updated"  # key absent from sample bundles

        on_disk = read_file(catalog, "en", "common")
        assert on_disk["welcome"] == "Hi there"
        assert on_disk["newKey"] == "New"
        assert on_disk["auth"] == {"adminOnly": "Admins only"}
        assert catalog.translate("welcome", language="en") == "Hi there"

    @pytest.mark.asyncio
    async def test_update_unsupported_language_is_400(self, test_client, admin_headers):
        response = await test_client.put(
            f"{BASE}/fr/common",
            json={"translations": [{"key": "welcome", "value": "Bonjour"}]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Unsupported language"}]

    @pytest.mark.asyncio
    async def test_update_unsupported_namespace_is_400(self, test_client, admin_headers):
        response = await test_client.put(
            f"{BASE}/en/payments",
            json={"translations": [{"key": "welcome", "value": "Hi"}]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Unsupported namespace"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"translations": "welcome=Hi"},
        {"translations": [{"key": "", "value": "Hi"}]},
        {"translations": [{"key": "welcome", "value": 5}]},
        {},
    ])
    async def test_malformed_body_is_400(self, test_client, catalog, admin_headers, payload):
        response = await test_client.put(f"{BASE}/en/common", json=payload, headers=admin_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]
        assert read_file(catalog, "en", "common")["welcome"] == "Welcome"

    @pytest.mark.asyncio
    async def test_missing_file_is_404(self, test_client, catalog, admin_headers):
        catalog.bundle_path("lo", "booking").unlink()

        response = await test_client.put(
            f"{BASE}/lo/booking",
            json={"translations": [{"key": "cancel", "value": "ຍົກເລີກ"}]},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Translation file not found"
        assert not catalog.bundle_path("lo", "booking").exists()


class TestAddTranslationKeys:

    @pytest.mark.asyncio
    async def test_add_skips_existing_keys(self, test_client, catalog, admin_headers):
        response = await test_client.post(
            f"{BASE}/lo/booking/add",
            json={"translations": [
                {"key": "bookingConfirmation", "value": "ignored"},
                {"key": "cancel", "value": "ຍົກເລີກ"},
            ]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"language": "lo", "namespace": "booking", "addedCount": 1}

        on_disk = read_file(catalog, "lo", "booking")
        assert on_disk == {"bookingConfirmation": "ການຢືນຢັນການຈອງ", "cancel": "ຍົກເລີກ"}

    @pytest.mark.asyncio
    async def test_added_key_disappears_from_missing_report(self, test_client, admin_headers):
        await test_client.post(
            f"{BASE}/lo/booking/add",
            json={"translations": [{"key": "cancel", "value": "ຍົກເລີກ"}]},
            headers=admin_headers,
        )

        response = await test_client.get("/api/translations/missing", headers=admin_headers)
        assert response.json()["data"]["missing"]["lo"] == {"common": ["greeting", "farewell"]}


class TestDeleteKeys:

    @pytest.mark.asyncio
    async def test_delete_counts_only_present_keys(self, test_client, catalog, admin_headers):
        response = await test_client.request(
            "DELETE",
            f"{BASE}/en/common/delete",
            json={"keys": ["farewell", "neverExisted"]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["deletedCount"] == 1
        assert "farewell" not in read_file(catalog, "en", "common")
        assert catalog.translate("farewell", language="en") == "farewell"

    @pytest.mark.asyncio
    async def test_blank_key_is_400(self, test_client, catalog, admin_headers):
        response = await test_client.request(
            "DELETE",
            f"{BASE}/en/common/delete",
            json={"keys": ["farewell", "  "]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [{"msg": "Each key must be a valid string"}]
        assert "farewell" in read_file(catalog, "en", "common")

    @pytest.mark.asyncio
    async def test_keys_must_be_a_list(self, test_client, admin_headers):
        response = await test_client.request(
            "DELETE",
            f"{BASE}/en/common/delete",
            json={"keys": "farewell"},
            headers=admin_headers,
        )

        assert response.status_code == 400


class TestStorageFailures:

    @pytest.mark.asyncio
    async def test_failed_write_is_generic_500(self, test_client, catalog, admin_headers, full_disk):
        path = catalog.bundle_path("en", "common")
        before = path.read_text(encoding="utf-8")

        response = await test_client.put(
            f"{BASE}/en/common",
            json={"translations": [{"key": "welcome", "value": "Hi"}]},
            headers={**admin_headers, "X-Request-ID": "trace-500"},
        )

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An unexpected error occurred. Please try again or contact support.",
            "request_id": "trace-500",
        }
        assert str(path) not in response.text
        assert "No space left" not in response.text
        assert path.read_text(encoding="utf-8") == before
        assert catalog.translate("welcome", language="en") == "Welcome"
