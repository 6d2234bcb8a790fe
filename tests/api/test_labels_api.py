import pytest

from label_tracker.models.enums import OrderStatus, OrderType


async def _next(client, order_id, headers):
    res = await client.get(f"/api/orders/{order_id}/next-label", headers=headers)
    assert res.status_code == 200
    return res.json()


@pytest.mark.asyncio
async def test_inspection_flow_updates_progress(client, operator_headers, factory):
    operator, headers = operator_headers
    order = await factory.order(po_number=10, total_sheets=1500)  # 4 labels

    label = await _next(client, order.id, headers)
    assert (label["rim_number"], label["cut_side"]) == (1, "left")

    started = await client.post(f"/api/labels/{label['id']}/start", headers=headers)
    assert started.status_code == 200
    assert started.json()["state"] == "in_progress"
    assert started.json()["inspector_np"] == operator.np
    assert started.json()["workstation_id"] == operator.workstation_id

    finished = await client.post(
        f"/api/labels/{label['id']}/finish", json={"second_inspector_np": "op9"}, headers=headers
    )
    assert finished.status_code == 200
    assert finished.json()["state"] == "completed"
    assert finished.json()["inspector_2_np"] == "OP9"

    progress = await client.get(f"/api/orders/{order.id}/progress", headers=headers)
    assert progress.json()["completed_labels"] == 1
    assert progress.json()["progress"] == 25
    assert progress.json()["status"] == "registered"

    following = await _next(client, order.id, headers)
    assert (following["rim_number"], following["cut_side"]) == (1, "right")


@pytest.mark.asyncio
async def test_finish_without_body(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=11, total_sheets=1000)
    label = await _next(client, order.id, headers)
    await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    res = await client.post(f"/api/labels/{label['id']}/finish", headers=headers)

    assert res.status_code == 200
    assert res.json()["inspector_2_np"] is None


@pytest.mark.asyncio
async def test_invalid_transitions_are_409(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=12, total_sheets=1000)
    label = await _next(client, order.id, headers)

    finish_pending = await client.post(f"/api/labels/{label['id']}/finish", headers=headers)
    await client.post(f"/api/labels/{label['id']}/start", headers=headers)
    restart = await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    assert finish_pending.status_code == 409
    assert finish_pending.json()["code"] == "E_LABEL_NOT_IN_PROGRESS"
    assert restart.status_code == 409


@pytest.mark.asyncio
async def test_completed_order_blocks_inspection(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=13, status=OrderStatus.COMPLETED)
    label = await _next(client, order.id, headers)

    res = await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    assert res.status_code == 409
    assert res.json()["code"] == "E_ORDER_NOT_PROCESSABLE"


@pytest.mark.asyncio
async def test_mmea_pack_sheets(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=14, total_sheets=1000, order_type=OrderType.MMEA)
    label = await _next(client, order.id, headers)
    assert label["cut_side"] is None
    await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    invalid = await client.post(f"/api/labels/{label['id']}/finish", json={"pack_sheets": 0}, headers=headers)
    res = await client.post(f"/api/labels/{label['id']}/finish", json={"pack_sheets": 500}, headers=headers)

    assert invalid.status_code == 422
    assert res.status_code == 200
    assert res.json()["pack_sheets"] == 500


@pytest.mark.asyncio
async def test_next_label_is_null_when_all_started(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=15, total_sheets=1000, order_type=OrderType.MMEA)
    label = await _next(client, order.id, headers)
    await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    assert await _next(client, order.id, headers) is None


@pytest.mark.asyncio
async def test_labels_inspected_by(client, operator_headers, factory):
    operator, headers = operator_headers
    order = await factory.order(po_number=16, total_sheets=1000)
    label = await _next(client, order.id, headers)
    await client.post(f"/api/labels/{label['id']}/start", headers=headers)

    mine = await client.get(f"/api/labels/inspected-by/{operator.np.lower()}", headers=headers)
    nobody = await client.get("/api/labels/inspected-by/ZZZ", headers=headers)

    assert [item["id"] for item in mine.json()] == [label["id"]]
    assert nobody.json() == []


@pytest.mark.asyncio
async def test_get_label(client, operator_headers, factory):
    _, headers = operator_headers
    order = await factory.order(po_number=17, total_sheets=1000)
    label = await _next(client, order.id, headers)

    found = await client.get(f"/api/labels/{label['id']}", headers=headers)
    missing = await client.get("/api/labels/99999", headers=headers)

    assert found.json()["production_order_id"] == order.id
    assert missing.status_code == 404
