"""
PackTrack Backend — HTTP API Tests
====================================

What:  End-to-end behaviour of the routes through an in-process ASGI client.

What we test:
    ✅ Create → update → delete scenario with status codes
    ✅ Multipart uploads are stored and served under /uploads
    ✅ 404 / 403 / 409 / 400 error mapping and error body shape
    ✅ Degraded store header, UI entry document, health, request IDs
"""

import json

import pytest

from packtrack.services.record_store import RecordStore


class TestPackageLifecycle:

    @pytest.mark.asyncio
    async def test_create_update_delete_scenario(self, test_client):
        response = await test_client.post(
            "/api/packages",
            json={"trackingNumber": "1234567890", "status": "in_transit"},
        )
        assert response.status_code == 201
        created = response.json()
        assert created["isGlobal"] is False
        assert [e["description"] for e in created["events"]] == ["Package created"]

        response = await test_client.put(
            "/api/packages/1234567890",
            json={"status": "delivered"},
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "delivered"
        assert updated["trackingNumber"] == "1234567890"
        assert updated["events"] == created["events"]

        response = await test_client.delete("/api/packages/1234567890")
        assert response.status_code == 200
        assert response.json() == {"message": "Package deleted successfully."}

        response = await test_client.get("/api/packages")
        assert "1234567890" not in [p["trackingNumber"] for p in response.json()]

    @pytest.mark.asyncio
    async def test_list_returns_created_record_verbatim(self, test_client):
        response = await test_client.post(
            "/api/packages",
            json={"status": "pending", "recipient": {"name": "Sam", "city": "Austin"}},
        )
        created = response.json()

        response = await test_client.get("/api/packages")

        assert response.status_code == 200
        assert response.json() == [created]
        assert created["recipient"] == {"name": "Sam", "city": "Austin"}

    @pytest.mark.asyncio
    async def test_list_returns_nonconforming_records_unchanged(self, test_client, test_settings):
        stored = [
            {"trackingNumber": 1234567890, "packageImage": 42},
            {"trackingNumber": "2", "status": "pending"},
        ]
        await RecordStore(test_settings.data_file).save(stored)

        response = await test_client.get("/api/packages")

        assert response.status_code == 200
        assert response.json() == stored

    @pytest.mark.asyncio
    async def test_create_with_unusual_image_value_is_returned_and_listed(self, test_client):
        response = await test_client.post(
            "/api/packages",
            json={"trackingNumber": "1111111111", "packageImage": 42},
        )

        assert response.status_code == 201
        created = response.json()
        assert created["packageImage"] == 42

        listed = await test_client.get("/api/packages")
        assert listed.status_code == 200
        assert listed.json() == [created]

    @pytest.mark.asyncio
    async def test_update_of_record_missing_core_fields(self, test_client, test_settings):
        await RecordStore(test_settings.data_file).save([{"trackingNumber": "3"}])

        response = await test_client.put("/api/packages/3", json={"status": "delivered"})

        assert response.status_code == 200
        assert response.json() == {
            "trackingNumber": "3",
            "status": "delivered",
            "packageImage": test_settings.placeholder_image,
        }

    @pytest.mark.asyncio
    async def test_list_empty_store(self, test_client):
        response = await test_client.get("/api/packages")
        assert response.status_code == 200
        assert response.json() == []


class TestMultipartUploads:

    @pytest.mark.asyncio
    async def test_create_with_file_stores_and_serves_image(self, test_client, sample_image_bytes):
        response = await test_client.post(
            "/api/packages",
            data={
                "trackingNumber": "777",
                "status": "pending",
                "events": json.dumps([
                    {"description": "Label printed", "timestamp": "2024-03-01T08:00:00Z",
                     "location": "Warehouse", "completed": True},
                ]),
            },
            files={"packageImage": ("box.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 201
        package = response.json()
        assert package["packageImage"].startswith("/uploads/")
        assert package["packageImage"].endswith("-box.jpg")
        assert package["events"][0]["description"] == "Label printed"

        image = await test_client.get(package["packageImage"])
        assert image.status_code == 200
        assert image.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_form_without_file_uses_placeholder(self, test_client, test_settings):
        response = await test_client.post(
            "/api/packages",
            data={"trackingNumber": "778", "packageImage": "null"},
        )

        assert response.status_code == 201
        assert response.json()["packageImage"] == test_settings.placeholder_image

    @pytest.mark.asyncio
    async def test_update_with_new_file_replaces_image(self, test_client, test_settings, sample_image_bytes):
        created = (await test_client.post(
            "/api/packages",
            data={"trackingNumber": "779"},
            files={"packageImage": ("old.jpg", sample_image_bytes, "image/jpeg")},
        )).json()

        response = await test_client.put(
            "/api/packages/779",
            data={"status": "delivered"},
            files={"packageImage": ("new.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 200
        assert response.json()["packageImage"].endswith("-new.jpg")
        old_name = created["packageImage"].rsplit("/", 1)[-1]
        assert not (test_settings.uploads_dir / old_name).exists()

    @pytest.mark.asyncio
    async def test_delete_removes_uploaded_image(self, test_client, test_settings, sample_image_bytes):
        created = (await test_client.post(
            "/api/packages",
            data={"trackingNumber": "780"},
            files={"packageImage": ("box.jpg", sample_image_bytes, "image/jpeg")},
        )).json()

        response = await test_client.delete("/api/packages/780")

        assert response.status_code == 200
        assert list(test_settings.uploads_dir.iterdir()) == []
        assert (await test_client.get(created["packageImage"])).status_code == 404


class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_duplicate_create_returns_409(self, test_client):
        await test_client.post("/api/packages", json={"trackingNumber": "1"})

        response = await test_client.post("/api/packages", json={"trackingNumber": "1"})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["message"] == "Tracking number already exists."
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_update_missing_returns_404(self, test_client):
        response = await test_client.put("/api/packages/nope", json={"status": "x"})

        assert response.status_code == 404
        assert response.json()["message"] == "Package not found."

    @pytest.mark.asyncio
    async def test_delete_missing_returns_404(self, test_client):
        response = await test_client.delete("/api/packages/nope")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_global_returns_403(self, test_client, test_settings, global_package):
        await RecordStore(test_settings.data_file).save([global_package])

        response = await test_client.delete("/api/packages/1234567890")

        assert response.status_code == 403
        assert response.json()["message"] == "Cannot delete global packages."
        listed = (await test_client.get("/api/packages")).json()
        assert [p["trackingNumber"] for p in listed] == ["1234567890"]

    @pytest.mark.asyncio
    async def test_malformed_json_returns_400(self, test_client):
        response = await test_client.post(
            "/api/packages",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_json_array_body_returns_400(self, test_client):
        response = await test_client.post("/api/packages", json=[{"trackingNumber": "1"}])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unreadable_store_lists_empty_with_header(self, test_client, test_settings):
        test_settings.data_file.write_text("garbage", encoding="utf-8")

        response = await test_client.get("/api/packages")

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Store-Degraded"] == "true"

    @pytest.mark.asyncio
    async def test_unreadable_store_rejects_create_with_500(self, test_client, test_settings):
        test_settings.data_file.write_text("garbage", encoding="utf-8")

        response = await test_client.post("/api/packages", json={"trackingNumber": "1"})

        assert response.status_code == 500
        assert test_settings.data_file.read_text(encoding="utf-8") == "garbage"


class TestSiteAndOperations:

    @pytest.mark.asyncio
    async def test_root_serves_index_document(self, test_client, test_settings):
        test_settings.index_file.write_text("<html><body>PackTrack</body></html>", encoding="utf-8")

        response = await test_client.get("/")

        assert response.status_code == 200
        assert "PackTrack" in response.text

    @pytest.mark.asyncio
    async def test_static_assets_are_served(self, test_client, test_settings):
        (test_settings.public_path / "placeholder.svg").write_text("<svg/>", encoding="utf-8")

        response = await test_client.get("/placeholder.svg")

        assert response.status_code == 200
        assert response.text == "<svg/>"

    @pytest.mark.asyncio
    async def test_health_reports_store_state(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "missing"
        assert body["uploads"] == "writable"
        assert body["package_count"] == 0

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/packages", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
