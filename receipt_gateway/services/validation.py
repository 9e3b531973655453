import re
from typing import Optional

from ..errors import FileTooLarge, ValidationError

ALLOWED_TYPES = re.compile(r"image/(jpeg|png)", re.IGNORECASE)
UNSUPPORTED_TYPE = "Unsupported file type: only jpg/jpeg/png allowed"


def check_content_type(content_type: Optional[str]) -> None:
    if not content_type or not ALLOWED_TYPES.search(content_type):
        raise ValidationError(UNSUPPORTED_TYPE)


def check_size(size_bytes: int, max_mb: float) -> None:
    if size_bytes > int(max_mb * 1024 * 1024):
        raise FileTooLarge(f"File too large (>{max_mb:g}MB)")


def validate_upload(content_type: Optional[str], size_bytes: Optional[int], max_mb: float) -> None:
    """Admit or reject an upload from its declared metadata.

    Raises ValidationError (400) for a disallowed type and FileTooLarge (413)
    when the size exceeds ``max_mb``. An unknown size is left to the store,
    which re-checks while the bytes are written.
    """
    check_content_type(content_type)
    if size_bytes is not None:
        check_size(size_bytes, max_mb)
