"""API tests for consumables: stock moves through issue, revoke and restock."""


def _consumable(client, quantity=10, name="USB mouse"):
    r = client.post("/api/consumables", json={"name": name, "quantity": quantity, "category": "Peripherals"})
    assert r.status_code == 201
    return r.json()


def test_create_consumable(client):
    data = _consumable(client, quantity=7)
    assert data["quantity"] == 7
    assert data["initial_quantity"] == 7
    assert data["issue_log"] == []


def test_issue_and_revoke(client, employee):
    e = employee("E-1", "Alice")
    c = _consumable(client, quantity=10)

    res = client.post(f"/api/consumables/{c['id']}/issue", json={"employee_id": e["id"], "quantity": 4})
    assert res.status_code == 201
    data = res.json()["consumable"]
    assert data["quantity"] == 6
    assert data["issue_log"][0]["status"] == "Active"
    issue_id = data["issue_log"][0]["id"]

    res = client.post(f"/api/consumables/{c['id']}/issues/{issue_id}/revoke")
    assert res.status_code == 200
    data = res.json()["consumable"]
    assert data["quantity"] == 10
    assert data["issue_log"][0]["status"] == "Reversed"

    res = client.post(f"/api/consumables/{c['id']}/issues/{issue_id}/revoke")
    assert res.status_code == 409
    assert res.json()["error"] == "AlreadyReversed"
    assert client.get(f"/api/consumables/{c['id']}").json()["quantity"] == 10


def test_issue_insufficient_stock(client, employee):
    e = employee("E-1")
    c = _consumable(client, quantity=2)
    res = client.post(f"/api/consumables/{c['id']}/issue", json={"employee_id": e["id"], "quantity": 3})
    assert res.status_code == 409
    assert res.json()["error"] == "InsufficientStock"
    data = client.get(f"/api/consumables/{c['id']}").json()
    assert data["quantity"] == 2
    assert data["issue_log"] == []


def test_issue_zero_quantity(client, employee):
    e = employee("E-1")
    c = _consumable(client)
    res = client.post(f"/api/consumables/{c['id']}/issue", json={"employee_id": e["id"], "quantity": 0})
    assert res.status_code == 422


def test_restock(client):
    c = _consumable(client, quantity=1)
    res = client.post(f"/api/consumables/{c['id']}/restock", json={"amount": 9})
    assert res.status_code == 200
    assert res.json()["quantity"] == 10
    assert res.json()["initial_quantity"] == 10


def test_update_cannot_touch_quantity(client):
    c = _consumable(client, quantity=5)
    res = client.put(f"/api/consumables/{c['id']}", json={"remarks": "Top shelf", "quantity": 100})
    assert res.status_code == 200
    assert res.json()["quantity"] == 5
    assert res.json()["remarks"] == "Top shelf"


def test_delete_consumable(client):
    c = _consumable(client)
    assert client.delete(f"/api/consumables/{c['id']}").status_code == 204
    assert client.get(f"/api/consumables/{c['id']}").status_code == 404


def test_list_consumables(client):
    _consumable(client, name="Toner")
    _consumable(client, name="Cable")
    res = client.get("/api/consumables", params={"search": "ton"})
    assert [c["name"] for c in res.json()["items"]] == ["Toner"]
