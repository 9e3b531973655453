from receipt_gateway.config import Settings


def test_from_env_reads_values():
    s = Settings.from_env({
        "IAPP_BASE_URL": "https://api.iapp.co.th",
        "IAPP_OCR_PATH": "/document-ocr/ocr",
        "IAPP_API_KEY": " secret ",
        "MAX_FILE_SIZE_MB": "5",
        "OCR_TIMEOUT_SECONDS": "45",
        "CORS_ALLOW_ORIGINS": "http://a.test, http://b.test",
        "SUPABASE_URL": "https://x.supabase.co",
        "SUPABASE_KEY": "anon",
        "SUPABASE_SERVICE_ROLE_KEY": "sr",
    })
    assert s.ocr_url == "https://api.iapp.co.th/document-ocr/ocr"
    assert s.iapp_api_key == "secret"
    assert s.max_file_size_mb == 5
    assert s.ocr_timeout_seconds == 45
    assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert s.supabase_key == "sr"
    assert s.missing() == []


def test_defaults():
    s = Settings.from_env({})
    assert s.max_file_size_mb == 10
    assert s.ocr_timeout_seconds == 30
    assert s.iapp_file_field == "file"
    assert s.upload_dir == "uploads"
    assert s.cors_allow_origins == ["*"]
    assert s.receipts_table == "receipts"
    assert s.missing() == ["IAPP_BASE_URL", "IAPP_OCR_PATH", "IAPP_API_KEY"]


def test_summary_never_leaks_key():
    s = Settings(iapp_api_key="secret")
    assert "secret" not in repr(s.summary())
    assert "secret" not in repr(s.summary(safe=False))
    assert s.summary()["api_key_present"] is True
