import logging
import time
from typing import Optional

if __name__ == "__main__":
    raise SystemExit("Run with: python -m uvicorn receipt_gateway.app:app --port 8080")

import httpx
from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .deps import build_supabase, get_relay, get_settings, get_upload_store
from .errors import ValidationError, outcome_response, register_error_handlers, unhandled_response
from .models.outcomes import Success, UpstreamError
from .models.schemas import OCRResponse
from .receipts import router as receipts_router
from .services.ocr import OCRRelay
from .services.receipts import ReceiptStore
from .services.uploads import TempUploadStore
from .services.validation import validate_upload

# ---------------------------------------
# App logger
# ---------------------------------------
logger = logging.getLogger("receipt_gateway")
if not logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

BOOT_VERSION = "1.0.0"
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

router = APIRouter()


# ── Health ──────────────────────────────────────────────────────────────────
@router.get("/health")
@router.get("/api/health")
def health(settings: Settings = Depends(get_settings)):
    return {"ok": True, "ts": int(time.time() * 1000), "config": settings.summary()}


# ── OCR relay ───────────────────────────────────────────────────────────────
@router.post("/api/ocr/receipt", responses={200: {"model": OCRResponse}})
async def ocr_receipt(
    request: Request,
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    store: TempUploadStore = Depends(get_upload_store),
    relay: OCRRelay = Depends(get_relay),
):
    if file is None:
        raise ValidationError('No file uploaded (field name must be "file")')

    started = time.perf_counter()
    try:
        validate_upload(file.content_type, file.size, settings.max_file_size_mb)
        async with store.hold(file, settings.max_file_size_mb) as upload:
            outcome = await relay.relay(upload.path, upload.filename, upload.content_type)
        _log_outcome(file.filename, outcome, int((time.perf_counter() - started) * 1000))
        return outcome_response(outcome)
    except ValidationError:
        # 400 / 413 via the registered handler
        raise
    except Exception as e:
        return unhandled_response(request, e)


def _log_outcome(filename: Optional[str], outcome, latency_ms: int) -> None:
    if isinstance(outcome, Success):
        logger.info("ocr_done filename=%s text_len=%s latency_ms=%s", filename, len(outcome.text), latency_ms)
    elif isinstance(outcome, UpstreamError):
        logger.warning("ocr_upstream_error filename=%s status=%s latency_ms=%s", filename, outcome.status_code, latency_ms)
    else:
        logger.error("ocr_transport_failure filename=%s cause=%r latency_ms=%s", filename, outcome.cause, latency_ms)


# ── App factory ─────────────────────────────────────────────────────────────
def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    supabase=None,
) -> FastAPI:
    """Build the gateway. ``transport`` and ``supabase`` let tests stub the provider and the store."""
    settings = settings or Settings.from_env()

    app = FastAPI(title="Receipt OCR gateway", version=BOOT_VERSION)
    app.state.settings = settings
    app.state.uploads = TempUploadStore(settings.upload_dir)
    app.state.uploads.ensure()
    app.state.relay = OCRRelay(settings, transport=transport)
    client = supabase if supabase is not None else build_supabase(settings)
    app.state.receipts = ReceiptStore(client, settings.receipts_table) if client is not None else None

    _allowed = list(settings.cors_allow_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials="*" not in _allowed,
        max_age=600,
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        logger.info(
            "%s %s %s %.1fms",
            request.method, request.url.path, response.status_code, (time.perf_counter() - started) * 1000,
        )
        return response

    register_error_handlers(app)
    app.include_router(router)
    app.include_router(receipts_router)

    logger.info("[boot] version=%s", BOOT_VERSION)
    logger.info("[boot] OCR endpoint=%s timeout=%ss", settings.ocr_url or "<unset>", settings.ocr_timeout_seconds)
    logger.info("[boot] upload_dir=%s max_file_size_mb=%s", settings.upload_dir, settings.max_file_size_mb)
    logger.info("[boot] CORS allow_origins=%s", _allowed)
    logger.info("[boot] receipt store=%s", "ready" if app.state.receipts else "NONE")
    missing = settings.missing()
    if missing:
        logger.warning("Please set %s in .env", ", ".join(missing))
    return app


app = create_app()
