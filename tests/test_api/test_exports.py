"""Excel export tests."""
import io
from openpyxl import load_workbook


def _rows(content: bytes) -> list[tuple]:
    ws = load_workbook(io.BytesIO(content)).active
    return list(ws.iter_rows(values_only=True))


def test_export_radios(client):
    user_id = client.post("/api/users", json={"name": "Jane Doe"}).json()["user"]["id"]
    client.post("/api/radios", json={"ID": "1", "Name": "ICOM"})
    client.post("/api/radios", json={"ID": "2", "Name": "ICOM"})
    client.post("/api/radios/1/checkout", json={"userID": user_id})
    client.post("/api/radios/2/checkout", json={"userID": "deleted-user"})

    res = client.get("/api/export/excel/radios")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/vnd.openxmlformats")

    rows = _rows(res.content)
    assert rows[0][0] == "ID"
    assert rows[1][0] == "1" and rows[1][4] == "Jane Doe"
    assert rows[2][0] == "2" and rows[2][4] == "Unknown user"


def test_export_checkout_log(client):
    client.post("/api/radios", json={"ID": "1", "Name": "ICOM"})
    client.post("/api/radios/1/checkout", json={"userID": "u1"})
    client.post("/api/radios/1/checkin")

    res = client.get("/api/export/excel/checkout-log")
    assert res.status_code == 200
    rows = _rows(res.content)
    assert [r[2] for r in rows[1:]] == ["Check-out", "Check-in"]
    assert rows[1][4] == "Unknown user"
