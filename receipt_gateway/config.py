# receipt_gateway/config.py
import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Product defaults (in code)
DEFAULT_FILE_FIELD = "file"          # multipart field the OCR provider reads
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_FILE_SIZE_MB = 10.0
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_RECEIPTS_TABLE = "receipts"


def _split_origins(raw: Optional[str]) -> List[str]:
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return origins or ["*"]


class Settings(BaseModel):
    """Process-wide configuration. Built once at startup, never mutated."""

    model_config = {"frozen": True}

    iapp_base_url: str = ""               # e.g. https://api.iapp.co.th
    iapp_ocr_path: str = ""               # e.g. /document-ocr/ocr
    iapp_api_key: str = ""
    iapp_file_field: str = DEFAULT_FILE_FIELD
    ocr_timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    max_file_size_mb: float = Field(DEFAULT_MAX_FILE_SIZE_MB, gt=0)
    upload_dir: str = DEFAULT_UPLOAD_DIR
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    supabase_url: str = ""
    supabase_key: str = ""
    receipts_table: str = DEFAULT_RECEIPTS_TABLE

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            iapp_base_url=(env.get("IAPP_BASE_URL") or "").strip(),
            iapp_ocr_path=(env.get("IAPP_OCR_PATH") or "").strip(),
            iapp_api_key=(env.get("IAPP_API_KEY") or "").strip(),
            iapp_file_field=(env.get("IAPP_FILE_FIELD") or DEFAULT_FILE_FIELD).strip(),
            ocr_timeout_seconds=float(env.get("OCR_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
            max_file_size_mb=float(env.get("MAX_FILE_SIZE_MB") or DEFAULT_MAX_FILE_SIZE_MB),
            upload_dir=env.get("UPLOAD_DIR") or DEFAULT_UPLOAD_DIR,
            cors_allow_origins=_split_origins(env.get("CORS_ALLOW_ORIGINS")),
            supabase_url=(env.get("SUPABASE_URL") or "").strip(),
            supabase_key=(env.get("SUPABASE_SERVICE_ROLE_KEY") or env.get("SUPABASE_KEY") or "").strip(),
            receipts_table=env.get("RECEIPTS_TABLE") or DEFAULT_RECEIPTS_TABLE,
        )

    @property
    def ocr_url(self) -> str:
        return f"{self.iapp_base_url}{self.iapp_ocr_path}"

    def missing(self) -> List[str]:
        """Names of required OCR settings that are unset."""
        required = {
            "IAPP_BASE_URL": self.iapp_base_url,
            "IAPP_OCR_PATH": self.iapp_ocr_path,
            "IAPP_API_KEY": self.iapp_api_key,
        }
        return [name for name, value in required.items() if not value]

    def summary(self, safe: bool = True) -> dict:
        out = {
            "base_url": self.iapp_base_url or None,
            "ocr_path": self.iapp_ocr_path or None,
            "max_file_size_mb": self.max_file_size_mb,
            "timeout_seconds": self.ocr_timeout_seconds,
            "api_key_present": bool(self.iapp_api_key),
        }
        if not safe:
            out["cors_allow_origins"] = list(self.cors_allow_origins)
            out["supabase_configured"] = bool(self.supabase_url and self.supabase_key)
        return out
