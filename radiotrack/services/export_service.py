import io
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from radiotrack.storage import RecordStore
import radiotrack.services.checkout_log_service as checkout_log
import radiotrack.services.radio_service as radio_svc
import radiotrack.services.user_service as user_svc

UNKNOWN_USER = "Unknown user"

_OPERATION_LABELS = {
    "check-out": "Check-out",
    "check-in": "Check-in",
}


def _header(ws, headers: list[str]) -> None:
    header_fill = PatternFill(start_color="1C2D42", end_color="1C2D42", fill_type="solid")
    header_font = Font(bold=True, color="F5A623", size=11)
    for col, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=h)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")


def _finish(wb: Workbook, ws, widths: list[int]) -> bytes:
    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "A2"
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _user_names(store: RecordStore) -> dict[str, str]:
    # Radios and log entries may point at deleted users
    return {u.id: u.name for u in user_svc.list_users(store, sort=False)}


def export_radios_excel(store: RecordStore) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Radios"
    _header(ws, ["ID", "Name", "Partially damaged", "Nonfunctional",
                 "Checked out to", "Checkout date", "Comments"])

    names = _user_names(store)
    for row_num, radio in enumerate(radio_svc.list_radios(store), 2):
        holder = ""
        if radio.checked_out_user:
            holder = names.get(radio.checked_out_user, UNKNOWN_USER)
        ws.cell(row=row_num, column=1, value=radio.radio_id)
        ws.cell(row=row_num, column=2, value=radio.name)
        ws.cell(row=row_num, column=3, value="Yes" if radio.partially_damaged else "No")
        ws.cell(row=row_num, column=4, value="Yes" if radio.nonfunctional else "No")
        ws.cell(row=row_num, column=5, value=holder)
        ws.cell(row=row_num, column=6,
                value=radio.checkout_date.strftime("%Y-%m-%d %H:%M") if radio.checkout_date else "")
        ws.cell(row=row_num, column=7, value=radio.comments)
        ws.cell(row=row_num, column=7).alignment = Alignment(wrap_text=True, vertical="top")

    return _finish(wb, ws, [10, 24, 18, 16, 28, 20, 60])


def export_checkout_log_excel(store: RecordStore) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Checkout log"
    _header(ws, ["Date", "Radio", "Operation", "User ID", "User"])

    names = _user_names(store)
    for row_num, entry in enumerate(checkout_log.query_entries(store), 2):
        ws.cell(row=row_num, column=1, value=entry.date.strftime("%Y-%m-%d %H:%M:%S"))
        ws.cell(row=row_num, column=2, value=entry.radio_id)
        ws.cell(row=row_num, column=3, value=_OPERATION_LABELS.get(entry.operation.value, entry.operation.value))
        ws.cell(row=row_num, column=4, value=entry.user_id)
        ws.cell(row=row_num, column=5, value=names.get(entry.user_id, UNKNOWN_USER))

    return _finish(wb, ws, [20, 10, 12, 38, 28])
