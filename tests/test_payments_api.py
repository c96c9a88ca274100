from datetime import date, timedelta

from conftest import make_payment, make_property, make_tenant


def _tenant(client, auth):
    prop = make_property(client, auth)
    return make_tenant(client, auth, prop["id"])


def test_status_is_derived_on_create(client, auth):
    tenant = _tenant(client, auth)
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    pending = make_payment(client, auth, tenant)
    assert pending["status"] == "pending"
    assert pending["tenantName"] == "Sarah Johnson"
    assert pending["propertyName"] == "Sunset View"

    overdue = make_payment(client, auth, tenant, dueDate=yesterday)
    assert overdue["status"] == "overdue"

    paid = make_payment(client, auth, tenant, dueDate=yesterday, paidAmount=1000)
    assert paid["status"] == "paid"
    assert paid["balance"] == 0


def test_status_in_body_is_ignored(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant, status="paid")
    assert payment["status"] == "pending"

    resp = client.patch(f"/api/payments/{payment['id']}", headers=auth, json={"status": "paid"})
    assert resp.get_json()["status"] == "pending"

    resp = client.patch(f"/api/payments/{payment['id']}", headers=auth, json={"paidAmount": 1000})
    assert resp.get_json()["status"] == "paid"


def test_transactions_roll_up(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    url = f"/api/payments/{payment['id']}/transactions"

    first = client.post(url, headers=auth, json={"amount": 400, "method": "mpesa", "reference": "QX1"})
    assert first.status_code == 201
    body = first.get_json()
    assert body["payment"]["paidAmount"] == 400
    assert body["payment"]["status"] == "pending"
    assert body["payment"]["method"] == "mpesa"
    assert body["payment"]["paidDate"] == date.today().isoformat()

    second = client.post(url, headers=auth, json={"amount": 600, "method": "cash"}).get_json()
    assert second["payment"]["paidAmount"] == 1000
    assert second["payment"]["status"] == "paid"

    history = client.get(url, headers=auth).get_json()
    assert [h["amount"] for h in history] == [400, 600]


def test_transaction_validation(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    resp = client.post(f"/api/payments/{payment['id']}/transactions", headers=auth,
                       json={"amount": 0, "method": "cheque"})
    assert resp.status_code == 400
    details = resp.get_json()["details"]
    assert details["amount"] == "must be greater than 0"
    assert details["method"].startswith("must be one of")


def test_list_filters_by_status(client, auth):
    tenant = _tenant(client, auth)
    make_payment(client, auth, tenant)
    make_payment(client, auth, tenant, dueDate=(date.today() - timedelta(days=2)).isoformat())
    overdue = client.get("/api/payments?status=overdue", headers=auth).get_json()
    assert len(overdue) == 1
    assert overdue[0]["status"] == "overdue"


def test_invoice_json(client, auth):
    client.patch("/api/auth/profile", headers=auth, json={"companyName": "Acme Lettings"})
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant, amount=2500, paidAmount=500)

    resp = client.get(f"/api/payments/{payment['id']}/invoice", headers=auth)
    assert resp.status_code == 200
    inv = resp.get_json()
    assert inv["number"] == "INV-" + payment["id"]
    assert inv["companyName"] == "Acme Lettings"
    assert inv["balance"] == 2000
    assert inv["balanceDisplay"] == "Ksh 2,000.00"
    assert inv["showPaidStamp"] is False
    assert inv["tenantName"] == "Sarah Johnson"


def test_invoice_pdf(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    resp = client.get(f"/api/payments/{payment['id']}/invoice?format=pdf", headers=auth)
    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.data.startswith(b"%PDF")


def test_receipt_only_for_paid_payments(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    resp = client.get(f"/api/payments/{payment['id']}/receipt", headers=auth)
    assert resp.status_code == 409

    client.post(f"/api/payments/{payment['id']}/transactions", headers=auth, json={"amount": 1000})
    resp = client.get(f"/api/payments/{payment['id']}/receipt", headers=auth)
    assert resp.status_code == 200
    assert resp.data.startswith(b"%PDF")


def test_payment_of_another_user_is_not_found(client, auth, other_auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    for path in ("", "/transactions", "/invoice", "/receipt"):
        resp = client.get(f"/api/payments/{payment['id']}{path}", headers=other_auth)
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Payment not found"}


def test_paid_amount_on_create_survives_later_transactions(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant, amount=1000, paidAmount=500, method="cash")
    assert payment["paidAmount"] == 500
    assert payment["status"] == "pending"

    url = f"/api/payments/{payment['id']}/transactions"
    body = client.post(url, headers=auth, json={"amount": 200}).get_json()
    assert body["payment"]["paidAmount"] == 700
    assert body["payment"]["balance"] == 300
    assert body["payment"]["status"] == "pending"

    history = client.get(url, headers=auth).get_json()
    assert [h["amount"] for h in history] == [500, 200]
    assert history[0]["notes"] == "Opening balance"
    assert history[0]["method"] == "cash"


def test_paid_amount_patch_before_and_after_transactions(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant, amount=1000)
    url = f"/api/payments/{payment['id']}"

    resp = client.patch(url, headers=auth, json={"paidAmount": 250})
    assert resp.status_code == 200
    assert resp.get_json()["paidAmount"] == 250

    body = client.post(f"{url}/transactions", headers=auth, json={"amount": 750}).get_json()
    assert body["payment"]["paidAmount"] == 1000
    assert body["payment"]["status"] == "paid"

    resp = client.patch(url, headers=auth, json={"paidAmount": 100})
    assert resp.status_code == 400
    assert resp.get_json()["details"] == {"paidAmount": "is set by recorded transactions"}
    assert client.get(url, headers=auth).get_json()["paidAmount"] == 1000

    # resending the recorded total is not a change
    resp = client.patch(url, headers=auth, json={"paidAmount": 1000, "notes": "June"})
    assert resp.status_code == 200
    assert resp.get_json()["notes"] == "June"


def test_patch_validates_against_stored_values(client, auth):
    tenant = _tenant(client, auth)
    payment = make_payment(client, auth, tenant)
    url = f"/api/payments/{payment['id']}"

    resp = client.patch(url, headers=auth, json={"amount": -1, "method": "barter"})
    assert resp.status_code == 400
    details = resp.get_json()["details"]
    assert set(details) == {"amount", "method"}

    resp = client.patch(url, headers=auth, json={"reference": "REF-9"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["reference"] == "REF-9"
    assert body["amount"] == 1000
    assert body["dueDate"] == payment["dueDate"]
