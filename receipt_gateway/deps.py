# receipt_gateway/deps.py
import logging
from typing import Any, Optional

from fastapi import Request
from supabase import create_client

from .config import Settings
from .errors import StoreUnavailable
from .services.ocr import OCRRelay
from .services.receipts import ReceiptStore
from .services.uploads import TempUploadStore

logger = logging.getLogger(__name__)


def build_supabase(settings: Settings) -> Optional[Any]:
    """Supabase client for the receipt store, or None when it is not configured."""
    if not (settings.supabase_url and settings.supabase_key):
        logger.warning("[boot] Supabase env missing; receipt CRUD disabled")
        return None
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error("[boot] create_client failed: %r", e)
        return None


# ---- request-scoped accessors (overridable in tests via app.state) ----

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_store(request: Request) -> TempUploadStore:
    return request.app.state.uploads


def get_relay(request: Request) -> OCRRelay:
    return request.app.state.relay


def get_receipt_store(request: Request) -> ReceiptStore:
    store = request.app.state.receipts
    if store is None:
        raise StoreUnavailable("Receipt store unavailable (set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)")
    return store
