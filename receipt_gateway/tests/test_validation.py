import pytest

from receipt_gateway.errors import FileTooLarge, ValidationError
from receipt_gateway.services.validation import check_size, validate_upload


@pytest.mark.parametrize("ctype", ["image/jpeg", "image/png", "image/JPEG", "IMAGE/PNG", "image/png; charset=binary"])
def test_accepts_jpeg_and_png(ctype):
    validate_upload(ctype, 10, 10)


@pytest.mark.parametrize("ctype", [None, "", "image/gif", "application/pdf", "text/plain", "image/jpg", "image/webp"])
def test_rejects_other_types(ctype):
    with pytest.raises(ValidationError) as ei:
        validate_upload(ctype, 10, 10)
    assert ei.value.status_code == 400
    assert "Unsupported file type" in ei.value.reason
    assert not isinstance(ei.value, FileTooLarge)


def test_rejects_oversize_with_413():
    with pytest.raises(FileTooLarge) as ei:
        validate_upload("image/png", 10 * 1024 * 1024 + 1, 10)
    assert ei.value.status_code == 413
    assert ei.value.reason == "File too large (>10MB)"


def test_exact_limit_is_allowed():
    check_size(10 * 1024 * 1024, 10)


def test_unknown_size_only_checks_type():
    validate_upload("image/jpeg", None, 1)


def test_type_is_checked_before_size():
    with pytest.raises(ValidationError) as ei:
        validate_upload("application/pdf", 100 * 1024 * 1024, 1)
    assert ei.value.status_code == 400
