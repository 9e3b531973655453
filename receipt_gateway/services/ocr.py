import asyncio
import json
import logging
import os
from typing import Any, Optional

import httpx

from ..config import Settings
from ..errors import ConfigurationError
from ..models.outcomes import RelayOutcome, Success, TransportFailure, UpstreamError
from .normalize import normalize_text

logger = logging.getLogger(__name__)


def _json_constant(_name: str) -> None:
    # NaN / Infinity / -Infinity are not valid JSON and cannot be echoed back
    return None


def _decode_body(resp: httpx.Response) -> Any:
    # Parsed JSON when the provider sends JSON, otherwise the raw text.
    if not resp.content:
        return ""
    try:
        return json.loads(resp.content, parse_constant=_json_constant)
    except ValueError:
        return resp.text


class OCRRelay:
    """Forwards one stored upload to the OCR provider and classifies the answer.

    A single attempt is made per call. Retrying is left to the client.
    ``ocr_timeout_seconds`` bounds the whole exchange, not just each read.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.ocr_timeout_seconds, transport=self._transport)

    async def relay(self, path: str | os.PathLike, filename: str, content_type: str) -> RelayOutcome:
        missing = self.settings.missing()
        if missing:
            logger.error("[ocr] provider not configured; missing=%s", ",".join(missing))
            return TransportFailure(ConfigurationError(f"OCR provider not configured: set {', '.join(missing)}"))

        url = self.settings.ocr_url
        headers = {"apikey": self.settings.iapp_api_key}
        limit = self.settings.ocr_timeout_seconds
        try:
            with open(path, "rb") as fh:
                # filename + content type must reach the provider unchanged;
                # some providers pick the decoder from the extension
                files = {self.settings.iapp_file_field: (filename, fh, content_type)}
                async with self._client() as client:
                    resp = await asyncio.wait_for(client.post(url, headers=headers, files=files), limit)
        except asyncio.TimeoutError:
            logger.warning("[ocr] no complete answer within %ss url=%s", limit, url)
            return TransportFailure(TimeoutError(f"OCR provider timed out after {limit:g}s"))
        except httpx.HTTPError as e:
            logger.warning("[ocr] transport failure url=%s error=%r", url, e)
            return TransportFailure(e)

        body = _decode_body(resp)
        if 200 <= resp.status_code < 300:
            return Success(text=normalize_text(body), raw=body)
        logger.info("[ocr] upstream status=%s body=%s", resp.status_code, resp.text[:500])
        return UpstreamError(status_code=resp.status_code, body=body)
