import pytest

from label_tracker.models.enums import OrderType


@pytest.mark.asyncio
async def test_register_order_end_to_end(client, admin_headers, fake_sirine, spec_payload, factory):
    _, headers = admin_headers
    team = await factory.workstation("Team 1")
    fake_sirine.add("/detail-order-pcht/1234567", spec_payload(1234567))

    res = await client.post(
        "/api/orders",
        json={"po_number": 1234567, "order_type": "regular", "team_id": team.id},
        headers=headers,
    )

    assert res.status_code == 201, res.text
    order = res.json()
    assert order["total_rims"] == 10
    assert order["inschiet_sheets"] == 500
    assert order["has_inschiet"] is True
    assert order["status"] == "registered"
    assert order["total_labels"] == 22
    assert order["progress"] == 0

    labels = await client.get(f"/api/orders/{order['id']}/labels", headers=headers)
    assert labels.status_code == 200
    first, last = labels.json()[0], labels.json()[-1]
    assert (first["rim_number"], first["cut_side"]) == (1, "left")
    assert (last["rim_number"], last["cut_side"], last["is_inschiet"]) == (999, "right", True)


@pytest.mark.asyncio
async def test_register_duplicate_po_is_409(client, admin_headers, fake_sirine, spec_payload, factory):
    _, headers = admin_headers
    await factory.order(po_number=42)
    fake_sirine.add("/detail-order-pcht/42", spec_payload(42))

    res = await client.post("/api/orders", json={"po_number": 42}, headers=headers)

    assert res.status_code == 409
    assert res.json()["field"] == "po_number"


@pytest.mark.asyncio
async def test_register_rims_reaching_inschiet_rim_is_422_not_409(client, admin_headers, fake_sirine, spec_payload):
    _, headers = admin_headers
    fake_sirine.add("/detail-order-pcht/777", spec_payload(777))

    res = await client.post("/api/orders", json={"po_number": 777, "start_rim": 995}, headers=headers)
    listed = await client.get("/api/orders", headers=headers)

    assert res.status_code == 422
    assert res.json()["code"] == "E_RIM_RANGE_TOO_LARGE"
    assert res.json()["field"] == "start_rim"
    assert listed.json() == []


@pytest.mark.asyncio
async def test_register_po_not_in_sirine_is_422(client, admin_headers):
    _, headers = admin_headers

    res = await client.post("/api/orders", json={"po_number": 5}, headers=headers)

    assert res.status_code == 422
    assert res.json()["code"] == "E_PO_NOT_IN_SIRINE"


@pytest.mark.asyncio
async def test_register_rejects_bad_payload(client, admin_headers):
    _, headers = admin_headers

    res = await client.post("/api/orders", json={"po_number": 0, "order_type": "weird"}, headers=headers)

    assert res.status_code == 422


@pytest.mark.asyncio
async def test_operator_cannot_register(client, operator_headers):
    _, headers = operator_headers

    res = await client.post("/api/orders", json={"po_number": 1, "total_sheets": 1000}, headers=headers)

    assert res.status_code == 403
    assert res.json()["detail"] == "Forbidden"


@pytest.mark.asyncio
async def test_list_and_filter_orders(client, operator_headers, factory):
    _, headers = operator_headers
    await factory.order(po_number=1)
    await factory.order(po_number=2, order_type=OrderType.MMEA)

    all_orders = await client.get("/api/orders", headers=headers)
    mmea = await client.get("/api/orders", params={"order_type": "mmea"}, headers=headers)
    completed = await client.get("/api/orders", params={"status": "completed"}, headers=headers)

    assert {order["po_number"] for order in all_orders.json()} == {1, 2}
    assert [order["po_number"] for order in mmea.json()] == [2]
    assert completed.json() == []


@pytest.mark.asyncio
async def test_order_detail_and_progress(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=3, total_sheets=1000)

    detail = await client.get(f"/api/orders/{order.id}", headers=headers)
    progress = await client.get(f"/api/orders/{order.id}/progress", headers=headers)
    missing = await client.get("/api/orders/9999", headers=headers)

    assert detail.status_code == 200
    assert detail.json()["total_labels"] == 2
    assert progress.json() == {
        "order_id": order.id,
        "status": "registered",
        "total_labels": 2,
        "completed_labels": 0,
        "in_progress_labels": 0,
        "pending_labels": 2,
        "progress": 0,
    }
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_advance_status(client, admin_headers, factory):
    _, headers = admin_headers
    order = await factory.order(po_number=4)

    first = await client.post(f"/api/orders/{order.id}/advance-status", headers=headers)
    second = await client.post(f"/api/orders/{order.id}/advance-status", headers=headers)
    third = await client.post(f"/api/orders/{order.id}/advance-status", headers=headers)

    assert first.json()["status"] == "in_progress"
    assert second.json()["status"] == "completed"
    assert third.status_code == 409
    assert third.json()["code"] == "E_ORDER_ALREADY_COMPLETED"


@pytest.mark.asyncio
async def test_update_and_delete_order(client, admin_headers, factory):
    _, headers = admin_headers
    team = await factory.workstation("Team 5")
    order = await factory.order(po_number=6)

    patched = await client.patch(f"/api/orders/{order.id}", json={"team_id": team.id}, headers=headers)
    bad_team = await client.patch(f"/api/orders/{order.id}", json={"team_id": 999}, headers=headers)
    deleted = await client.delete(f"/api/orders/{order.id}", headers=headers)
    gone = await client.get(f"/api/orders/{order.id}", headers=headers)

    assert patched.status_code == 200
    assert patched.json()["team_id"] == team.id
    assert bad_team.status_code == 422
    assert deleted.status_code == 204
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_add_label(client, admin_headers, factory):
    _, headers = admin_headers
    order = await factory.order(po_number=7, total_sheets=1000)

    created = await client.post(
        f"/api/orders/{order.id}/labels", json={"rim_number": 2, "cut_side": "left"}, headers=headers
    )
    duplicate = await client.post(
        f"/api/orders/{order.id}/labels", json={"rim_number": 2, "cut_side": "left"}, headers=headers
    )
    no_side = await client.post(f"/api/orders/{order.id}/labels", json={"rim_number": 3}, headers=headers)

    assert created.status_code == 201
    assert created.json()["state"] == "pending"
    assert duplicate.status_code == 409
    assert no_side.status_code == 422
