from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from radiotrack.dependencies import get_photo_store
from radiotrack.services.photo_store import PhotoStore

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{filename:path}")
def get_image(filename: str, photos: PhotoStore = Depends(get_photo_store)):
    """Serve a saved profile photo; content type follows the file extension."""
    path = photos.path_for(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path)
