from fastapi import APIRouter, Depends
from fastapi.responses import Response
from radiotrack.dependencies import get_store
from radiotrack.storage import RecordStore
import radiotrack.services.export_service as svc

router = APIRouter(prefix="/api/export", tags=["export"])

_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/excel/radios")
def export_radios(store: RecordStore = Depends(get_store)):
    return Response(
        content=svc.export_radios_excel(store),
        media_type=_XLSX,
        headers={"Content-Disposition": "attachment; filename=radios.xlsx"},
    )


@router.get("/excel/checkout-log")
def export_checkout_log(store: RecordStore = Depends(get_store)):
    return Response(
        content=svc.export_checkout_log_excel(store),
        media_type=_XLSX,
        headers={"Content-Disposition": "attachment; filename=checkout-log.xlsx"},
    )
