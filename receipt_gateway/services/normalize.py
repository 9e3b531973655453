from __future__ import annotations

from typing import Any, Callable, List, Optional

# Each extractor looks at one known response shape and returns None when
# the shape is absent. Order matters: the first non-empty string wins.
Extractor = Callable[[Any], Optional[str]]


def _dig(body: Any, *keys: str) -> Optional[str]:
    node = body
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, str) else None


def from_plain_string(body: Any) -> Optional[str]:
    return body if isinstance(body, str) else None


def from_text(body: Any) -> Optional[str]:
    return _dig(body, "text")


def from_data_text(body: Any) -> Optional[str]:
    return _dig(body, "data", "text")


def from_result_text(body: Any) -> Optional[str]:
    return _dig(body, "result", "text")


def from_data_data_text(body: Any) -> Optional[str]:
    # double-wrapped provider variant
    return _dig(body, "data", "data", "text")


EXTRACTORS: List[Extractor] = [
    from_plain_string,
    from_text,
    from_data_text,
    from_result_text,
    from_data_data_text,
]


def normalize_text(body: Any) -> str:
    """Best-effort plain text from an upstream OCR body; "" when no shape matches."""
    for extract in EXTRACTORS:
        text = extract(body)
        if text:
            return text
    return ""
