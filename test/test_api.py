from io import BytesIO

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from conftest import FixedClock

from pms.api.app import create_app
from pms.application.container import build_container
from pms.config import Settings


MEDICINE_BODY = {
    "name": "Amoxicillin 250mg",
    "genericName": "Amoxicillin",
    "category": "Antibiotics",
    "manufacturer": "BioLabs",
    "batchNumber": "AM2026001",
    "expiryDate": "2027-06-30",
    "quantity": 40,
    "purchasePrice": "4.00",
    "sellingPrice": 6.5,
    "minimumStock": 10,
}


def _client(seed: bool = True, **kwargs):
    container = build_container(Settings(seed_sample_data=seed), clock=FixedClock())
    return TestClient(create_app(container), **kwargs), container


def test_list_seeded_medicines_uses_camel_case_and_decimal_strings():
    client, _ = _client()

    resp = client.get("/api/medicines")

    assert resp.status_code == 200
    body = resp.json()
    assert [m["id"] for m in body] == [1, 2]
    assert body[0]["genericName"] == "Acetaminophen"
    assert body[0]["sellingPrice"] == "2.50"
    assert body[0]["minimumStock"] == 50
    assert body[0]["supplierId"] == 1
    assert body[0]["createdAt"].startswith("2026-10-18T10:00:00")


def test_create_get_update_delete_medicine():
    client, _ = _client(seed=False)

    created = client.post("/api/medicines", json=MEDICINE_BODY)
    assert created.status_code == 201
    medicine = created.json()
    assert medicine["id"] == 1
    assert medicine["sellingPrice"] == "6.50"
    assert medicine["expiryDate"] == "2027-06-30"

    assert client.get("/api/medicines/1").json()["name"] == "Amoxicillin 250mg"

    patched = client.patch("/api/medicines/1", json={"quantity": 5, "description": "shelf B"})
    assert patched.status_code == 200
    assert patched.json()["quantity"] == 5
    assert patched.json()["batchNumber"] == "AM2026001"

    assert client.delete("/api/medicines/1").status_code == 204
    assert client.get("/api/medicines/1").status_code == 404
    assert client.delete("/api/medicines/1").status_code == 404
    assert client.patch("/api/medicines/1", json={"quantity": 1}).status_code == 404


def test_create_medicine_with_negative_quantity_is_rejected_without_side_effects():
    client, container = _client(seed=False)

    resp = client.post("/api/medicines", json={**MEDICINE_BODY, "quantity": -5})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid data"
    assert [d["field"] for d in body["details"]] == ["quantity"]
    assert client.get("/api/medicines").json() == []
    assert container.repo.peek_next_id("medicines") == 1


def test_create_medicine_with_missing_fields_reports_each_field():
    client, _ = _client(seed=False)

    resp = client.post("/api/medicines", json={"name": "Nameless"})

    assert resp.status_code == 400
    fields = {d["field"] for d in resp.json()["details"]}
    assert {"category", "manufacturer", "batchNumber", "expiryDate", "purchasePrice", "sellingPrice"} <= fields


def test_patch_rejects_null_for_required_field():
    client, _ = _client()

    resp = client.patch("/api/medicines/1", json={"name": None})

    assert resp.status_code == 400
    assert client.get("/api/medicines/1").json()["name"] == "Paracetamol 500mg"


def test_search_and_low_stock_routes():
    client, _ = _client()

    assert client.get("/api/medicines/search").status_code == 400
    assert client.get("/api/medicines/search", params={"q": " "}).json() == {"error": "Search query is required."}

    found = client.get("/api/medicines/search", params={"q": "ACETAMINOPHEN"}).json()
    assert [m["name"] for m in found] == ["Paracetamol 500mg"]

    low = client.get("/api/medicines/low-stock").json()
    assert [m["name"] for m in low] == ["Paracetamol 500mg", "Ibuprofen 400mg"]


def test_sale_flow_updates_stock_recent_sales_and_dashboard():
    client, _ = _client()

    resp = client.post("/api/sales", json={
        "customerName": "John Doe",
        "paymentMethod": "cash",
        "subtotal": "7.50",
        "tax": "0.38",
        "total": "7.88",
        "items": [
            {"medicineId": 1, "medicineName": "Paracetamol 500mg", "quantity": 3, "price": "2.50", "total": "7.50"},
        ],
    })

    assert resp.status_code == 201
    sale = resp.json()
    assert sale["total"] == "7.88"
    assert sale["customerName"] == "John Doe"
    assert sale["items"][0]["saleId"] == sale["id"]
    assert sale["items"][0]["medicineName"] == "Paracetamol 500mg"

    assert client.get("/api/medicines/1").json()["quantity"] == 5
    assert client.get("/api/sales/recent").json()[0]["id"] == sale["id"]
    assert client.get(f"/api/sales/{sale['id']}").json()["items"][0]["quantity"] == 3
    assert client.get("/api/sales/99").status_code == 404

    stats = client.get("/api/dashboard/stats").json()
    assert stats == {"totalMedicines": 2, "lowStockItems": 2, "todaySales": 7.88, "activeCustomers": 1}


def test_sale_rejections_return_400_and_leave_stock_alone():
    client, _ = _client()

    mismatch = client.post("/api/sales", json={
        "customerName": "John Doe",
        "total": "1.00",
        "items": [{"medicineId": 1, "quantity": 1}],
    })
    assert mismatch.status_code == 400
    assert mismatch.json()["details"][0]["field"] == "total"

    oversell = client.post("/api/sales", json={"items": [{"medicineId": 1, "quantity": 9}]})
    assert oversell.status_code == 400
    assert "Not enough stock" in oversell.json()["error"]

    unknown = client.post("/api/sales", json={"items": [{"medicineId": 77, "quantity": 1}]})
    assert unknown.status_code == 400

    bad_method = client.post("/api/sales", json={"paymentMethod": "barter", "items": [{"medicineId": 1, "quantity": 1}]})
    assert bad_method.status_code == 400

    empty = client.post("/api/sales", json={"items": []})
    assert empty.status_code == 400

    assert client.get("/api/medicines/1").json()["quantity"] == 8
    assert client.get("/api/sales").json() == []


def test_recent_sales_falls_back_to_default_limit():
    client, container = _client()
    container.repo.update_medicine(1, {"quantity": 100})
    for _ in range(12):
        client.post("/api/sales", json={"items": [{"medicineId": 1, "quantity": 1}]})

    assert len(client.get("/api/sales/recent", params={"limit": 3}).json()) == 3
    for limit in ("0", "-2", "abc"):
        resp = client.get("/api/sales/recent", params={"limit": limit})
        assert resp.status_code == 200
        assert len(resp.json()) == 10
    assert resp.json()[0]["id"] == 12
    assert len(client.get("/api/sales/recent").json()) == 10


def test_customer_and_supplier_routes():
    client, _ = _client()

    customer = client.post("/api/customers", json={"name": "Tom Baker", "phone": "+1-555-0999", "dateOfBirth": "1990-01-02"})
    assert customer.status_code == 201
    assert customer.json()["dateOfBirth"] == "1990-01-02"
    assert [c["name"] for c in client.get("/api/customers/search", params={"q": "0999"}).json()] == ["Tom Baker"]
    assert client.get("/api/customers/search").status_code == 400
    assert client.patch("/api/customers/2", json={"email": "tom@example.com"}).json()["email"] == "tom@example.com"
    assert client.delete("/api/customers/2").status_code == 204
    assert client.get("/api/customers/2").status_code == 404

    assert client.post("/api/suppliers", json={"name": "No phone"}).status_code == 400
    assert client.delete("/api/suppliers/1").status_code == 204
    assert client.get("/api/medicines/1").json()["supplierId"] == 1
    assert [s["name"] for s in client.get("/api/suppliers").json()] == ["MediSupply Inc"]


def test_report_summary_and_export():
    client, _ = _client()
    client.post("/api/sales", json={"items": [{"medicineId": 2, "quantity": 2}]})

    summary = client.get("/api/reports/summary").json()
    assert summary["salesCount"] == 1
    assert summary["totalRevenue"] == "6.83"
    assert summary["topCategories"][0]["category"] == "Pain Relief"

    export = client.get("/api/reports/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert "pharmacy-report-20261018.xlsx" in export.headers["content-disposition"]
    wb = load_workbook(BytesIO(export.content))
    assert "Sales Detail" in wb.sheetnames


def test_unexpected_errors_become_generic_500(monkeypatch):
    client, container = _client(raise_server_exceptions=False)

    def boom():
        raise RuntimeError("store exploded")

    monkeypatch.setattr(container.inventory, "list_medicines", boom)
    resp = client.get("/api/medicines")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_oversized_amounts_are_rejected_with_400():
    client, container = _client()

    medicine = client.post("/api/medicines", json={**MEDICINE_BODY, "sellingPrice": 1e30})
    assert medicine.status_code == 400
    assert medicine.json()["details"][0]["field"] == "sellingPrice"
    assert container.repo.peek_next_id("medicines") == 3

    patched = client.patch("/api/medicines/1", json={"purchasePrice": "123456789012"})
    assert patched.status_code == 400

    sale = client.post("/api/sales", json={"items": [{"medicineId": 1, "quantity": 1, "total": "1e30"}]})
    assert sale.status_code == 400
    totals = client.post("/api/sales", json={"total": "1e30", "items": [{"medicineId": 1, "quantity": 1}]})
    assert totals.status_code == 400

    assert client.get("/api/medicines/1").json()["quantity"] == 8


def test_export_survives_names_with_control_characters():
    client, _ = _client()

    assert client.patch("/api/medicines/1", json={"name": "Para\u0001cetamol"}).status_code == 200
    export = client.get("/api/reports/export")

    assert export.status_code == 200
    wb = load_workbook(BytesIO(export.content))
    assert wb["Inventory"]["B2"].value == "Paracetamol"
