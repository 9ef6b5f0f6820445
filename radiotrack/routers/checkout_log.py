from fastapi import APIRouter, Depends, Query
from radiotrack.dependencies import get_store
from radiotrack.schemas.checkout_log import CheckoutLogEntry, CheckoutLogCreate
from radiotrack.storage import RecordStore
import radiotrack.services.checkout_log_service as svc

router = APIRouter(prefix="/api/checkout-log", tags=["checkout-log"])


@router.get("", response_model=list[CheckoutLogEntry])
def query_entries(
    radio_id: str | None = Query(None, alias="radioID"),
    user_id: str | None = Query(None, alias="userID"),
    store: RecordStore = Depends(get_store),
):
    return svc.query_entries(store, radio_id=radio_id, user_id=user_id)


@router.post("", response_model=CheckoutLogEntry, status_code=201)
def append_entry(data: CheckoutLogCreate, store: RecordStore = Depends(get_store)):
    return svc.append_entry(store, data.radio_id, data.user_id, data.operation)
