from fastapi import APIRouter, Depends
from radiotrack.dependencies import get_store, get_photo_store
from radiotrack.schemas.user import User, UserCreate, UserUpdate, UserMutationResponse
from radiotrack.schemas.common import MessageResponse
from radiotrack.services.photo_store import PhotoStore
from radiotrack.storage import RecordStore
import radiotrack.services.user_service as svc

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[User])
def list_users(store: RecordStore = Depends(get_store)):
    return svc.list_users(store)


@router.get("/{user_id}", response_model=User)
def get_user(user_id: str, store: RecordStore = Depends(get_store)):
    return svc.get_user(store, user_id)


@router.post("", response_model=UserMutationResponse, status_code=201)
def create_user(
    data: UserCreate,
    store: RecordStore = Depends(get_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    user, warnings = svc.create_user(store, photos, data)
    message = "User successfully added" if not warnings else "User added, but the profile photo was not saved"
    return UserMutationResponse(message=message, user=user, warnings=warnings)


@router.put("/{user_id}", response_model=UserMutationResponse)
def update_user(
    user_id: str,
    data: UserUpdate,
    store: RecordStore = Depends(get_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    user, warnings = svc.update_user(store, photos, user_id, data)
    message = "User successfully updated" if not warnings else "User updated, but the profile photo was not saved"
    return UserMutationResponse(message=message, user=user, warnings=warnings)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    store: RecordStore = Depends(get_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    svc.delete_user(store, photos, user_id)
    return MessageResponse(message="User deleted successfully")
