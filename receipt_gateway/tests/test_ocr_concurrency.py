import asyncio
import os
import re

import httpx

from receipt_gateway.app import create_app


class SlowEchoProvider:
    """Answers with the uploaded filename after a short pause, so requests overlap."""

    def __init__(self, upload_dir):
        self.upload_dir = upload_dir
        self.seen = set()
        self.calls = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        self.seen.update(os.listdir(self.upload_dir))
        await asyncio.sleep(0.05)
        name = re.search(rb'filename="([^"]+)"', request.content).group(1).decode()
        return httpx.Response(200, json={"result": {"text": f"text of {name}"}})


def test_concurrent_uploads_are_independent(settings, upload_dir):
    provider = SlowEchoProvider(upload_dir)
    app = create_app(settings, transport=httpx.MockTransport(provider))

    async def both():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://gateway") as ac:
            return await asyncio.gather(
                ac.post("/api/ocr/receipt", files={"file": ("a.jpg", b"\xff\xd8a" * 100, "image/jpeg")}),
                ac.post("/api/ocr/receipt", files={"file": ("b.png", b"\x89PNGb" * 100, "image/png")}),
            )

    ra, rb = asyncio.run(both())
    assert ra.status_code == rb.status_code == 200
    assert ra.json()["data"]["text"] == "text of a.jpg"
    assert rb.json()["data"]["text"] == "text of b.png"
    assert provider.calls == 2
    # each request held its own distinctly named scratch file
    assert len(provider.seen) == 2
    assert list(upload_dir.iterdir()) == []
