# receipt_gateway/receipts.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from .deps import get_receipt_store
from .models.schemas import Receipt, ReceiptIn, ReceiptPatch
from .services.receipts import ReceiptStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


def _store_error(status_code: int, op: str, e: Exception) -> JSONResponse:
    logger.error("receipts.%s failed: %s", op, e, exc_info=True)
    return JSONResponse(status_code=status_code, content={"error": str(e)})


@router.get("", response_model=List[Receipt])
def list_receipts(store: ReceiptStore = Depends(get_receipt_store)):
    try:
        return store.find_all()
    except Exception as e:
        return _store_error(500, "find_all", e)


@router.post("", response_model=Receipt)
def create_receipt(body: ReceiptIn, store: ReceiptStore = Depends(get_receipt_store)):
    try:
        return store.insert(body.model_dump(mode="json"))
    except Exception as e:
        return _store_error(400, "insert", e)


@router.put("/{receipt_id}", response_model=Optional[Receipt])
def update_receipt(receipt_id: str, body: ReceiptPatch, store: ReceiptStore = Depends(get_receipt_store)):
    # null when the id does not exist
    try:
        return store.update(receipt_id, body.model_dump(mode="json", exclude_unset=True))
    except Exception as e:
        return _store_error(400, "update", e)


@router.delete("/{receipt_id}")
def delete_receipt(receipt_id: str, store: ReceiptStore = Depends(get_receipt_store)):
    try:
        store.delete(receipt_id)
    except Exception as e:
        return _store_error(400, "delete", e)
    return {"success": True}
