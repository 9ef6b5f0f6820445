from fastapi import APIRouter, Depends, Query
from radiotrack.dependencies import get_store
from radiotrack.schemas.radio import Radio, RadioCreate, RadioUpsert, CheckoutRequest, CommentRequest
from radiotrack.schemas.common import MessageResponse
from radiotrack.storage import RecordStore
import radiotrack.services.radio_service as svc

router = APIRouter(prefix="/api/radios", tags=["radios"])


@router.get("", response_model=list[Radio])
def list_radios(
    radio_id: str | None = Query(None, alias="radioID"),
    user_id: str | None = Query(None, alias="userID", description="Radios checked out to this user"),
    store: RecordStore = Depends(get_store),
):
    return svc.list_radios(store, radio_id=radio_id, user_id=user_id)


@router.post("", response_model=Radio, status_code=201)
def create_radio(data: RadioCreate, store: RecordStore = Depends(get_store)):
    return svc.create_radio(store, data)


@router.put("", response_model=Radio)
def upsert_radio(data: RadioUpsert, store: RecordStore = Depends(get_store)):
    return svc.upsert_radio(store, data)


@router.get("/{radio_id}", response_model=Radio)
def get_radio(radio_id: str, store: RecordStore = Depends(get_store)):
    return svc.get_radio(store, radio_id)


@router.delete("/{radio_id}", response_model=MessageResponse)
def delete_radio(radio_id: str, store: RecordStore = Depends(get_store)):
    svc.delete_radio(store, radio_id)
    return MessageResponse(message="Radio deleted successfully")


@router.post("/{radio_id}/checkout", response_model=Radio)
def check_out(radio_id: str, data: CheckoutRequest, store: RecordStore = Depends(get_store)):
    return svc.check_out(store, radio_id, data.user_id, force=data.force)


@router.post("/{radio_id}/checkin", response_model=Radio)
def check_in(radio_id: str, store: RecordStore = Depends(get_store)):
    return svc.check_in(store, radio_id)


@router.post("/{radio_id}/comments", response_model=Radio)
def append_comment(radio_id: str, data: CommentRequest, store: RecordStore = Depends(get_store)):
    return svc.append_comment(store, radio_id, data)
