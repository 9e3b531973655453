# receipt_gateway/tests/conftest.py
import os
import tempfile

# --- Set env before anything imports the app module (it builds a default app) ---
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="receipt-gateway-")
for _name in ("IAPP_BASE_URL", "IAPP_OCR_PATH", "IAPP_API_KEY", "SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_SERVICE_ROLE_KEY"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient

from receipt_gateway.app import create_app
from receipt_gateway.config import Settings
from receipt_gateway.tests.stubs import StubProvider


@pytest.fixture
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    return d


@pytest.fixture
def settings(upload_dir):
    return Settings(
        iapp_base_url="https://ocr.example",
        iapp_ocr_path="/document-ocr/ocr",
        iapp_api_key="test-key",
        max_file_size_mb=1,
        upload_dir=str(upload_dir),
        cors_allow_origins=["http://localhost:5173"],
    )


@pytest.fixture
def provider(upload_dir):
    return StubProvider(upload_dir=upload_dir)


@pytest.fixture
def app(settings, provider):
    return create_app(settings, transport=provider.transport)


@pytest.fixture
def client(app):
    return TestClient(app)
