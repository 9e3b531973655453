import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def _utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


class ReceiptStore:
    """Thin pass-through to a Supabase table of receipt documents."""

    def __init__(self, client: Any, table: str = "receipts"):
        self.client = client
        self.table = table

    def _table(self):
        return self.client.table(self.table)

    def find_all(self) -> List[dict]:
        r = self._table().select("*").execute()
        return list(getattr(r, "data", None) or [])

    def insert(self, doc: dict) -> dict:
        payload = {"id": str(uuid.uuid4()), "createdAt": _utc_iso(), **doc}
        r = self._table().insert(payload).execute()
        rows = getattr(r, "data", None) or []
        return rows[0] if rows else payload

    def update(self, receipt_id: str, changes: dict) -> Optional[dict]:
        r = self._table().update(changes).eq("id", receipt_id).execute()
        rows = getattr(r, "data", None) or []
        return rows[0] if rows else None

    def delete(self, receipt_id: str) -> None:
        self._table().delete().eq("id", receipt_id).execute()
        logger.info("receipt deleted id=%s", receipt_id)
