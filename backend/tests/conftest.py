"""
PackTrack Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own temporary public directory, so the record
       document and uploads never leak between tests.

Fixture Hierarchy (all function-scoped):
    public_dir → test_settings → record_store / image_store → package_service
                               → test_client (HTTPX AsyncClient over ASGI)
"""

import os
import tempfile

# Override settings BEFORE any packtrack import builds the module-level app
os.environ["PUBLIC_DIR"] = tempfile.mkdtemp(prefix="packtrack_test_")
os.environ["SEED_SAMPLE_PACKAGES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from packtrack.config import Settings
from packtrack.schemas.package import ImageUpload, PackageSubmission
from packtrack.services.image_store import ImageStore
from packtrack.services.package_service import PackageService
from packtrack.services.record_store import RecordStore


@pytest.fixture
def public_dir(tmp_path):
    directory = tmp_path / "public"
    directory.mkdir()
    return directory


@pytest.fixture
def test_settings(public_dir):
    return Settings(
        public_dir=str(public_dir),
        seed_sample_packages=False,
        log_level="WARNING",
    )


@pytest.fixture
def record_store(test_settings):
    return RecordStore(test_settings.data_file)


@pytest.fixture
def image_store(test_settings):
    return ImageStore(test_settings.uploads_dir)


@pytest.fixture
def package_service(record_store, image_store, test_settings):
    return PackageService(
        record_store=record_store,
        image_store=image_store,
        placeholder_image=test_settings.placeholder_image,
    )


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def make_submission(sample_image_bytes):
    """Builds a PackageSubmission; `image="box.jpg"` attaches the sample JPEG."""

    def _make(image=None, kind=None, **fields):
        upload = None
        if image:
            upload = ImageUpload(filename=image, content=sample_image_bytes, content_type="image/jpeg")
        return PackageSubmission(
            kind=kind or ("form" if upload else "json"),
            fields=fields,
            image=upload,
        )

    return _make


@pytest.fixture
def global_package(test_settings):
    return {
        "trackingNumber": "1234567890",
        "status": "in_transit",
        "packageImage": test_settings.placeholder_image,
        "events": [
            {
                "description": "Package created",
                "timestamp": "2024-01-01T09:00:00.000Z",
                "location": "Origin facility",
                "completed": True,
            }
        ],
        "isGlobal": True,
        "createdAt": "2024-01-01T00:00:00.000Z",
    }


@pytest_asyncio.fixture
async def test_client(test_settings):
    """
    HTTPX AsyncClient routed straight into a fresh app built from test_settings.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/packages")
            assert response.status_code == 200
    """
    from packtrack.main import create_app

    app = create_app(test_settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
