import pytest

from label_tracker.models.enums import OrderStatus, OrderType, UserRole
from label_tracker.services import queries


async def _all(db, stmt):
    return list((await db.execute(stmt)).scalars().all())


@pytest.mark.asyncio
async def test_order_scopes(factory, db_session_clean):
    team = await factory.workstation("Team 1")
    await factory.order(po_number=1, team=team)
    await factory.order(po_number=2, order_type=OrderType.MMEA, status=OrderStatus.IN_PROGRESS)
    await factory.order(po_number=3, status=OrderStatus.COMPLETED)

    regular = await _all(db_session_clean, queries.regular_orders())
    mmea = await _all(db_session_clean, queries.mmea_orders())
    in_progress = await _all(db_session_clean, queries.orders_with_status(OrderStatus.IN_PROGRESS))
    for_team = await _all(db_session_clean, queries.orders_for_team(team.id))

    assert sorted(order.po_number for order in regular) == [1, 3]
    assert [order.po_number for order in mmea] == [2]
    assert [order.po_number for order in in_progress] == [2]
    assert [order.po_number for order in for_team] == [1]


@pytest.mark.asyncio
async def test_label_scopes(factory, db_session_clean):
    order = await factory.order(po_number=10, total_sheets=1500)
    other = await factory.order(po_number=11, total_sheets=1000, order_type=OrderType.MMEA)
    first = (await _all(db_session_clean, queries.processing_order(queries.labels_for_order(order.id))))[0]
    first.start_inspection("OP1")
    await db_session_clean.commit()

    pending = await _all(db_session_clean, queries.pending_labels(order.id))
    processed = await _all(db_session_clean, queries.processed_labels())
    inschiet = await _all(db_session_clean, queries.inschiet_labels(order.id))
    all_pending = await _all(db_session_clean, queries.pending_labels())

    assert len(pending) == 3
    assert [label.id for label in processed] == [first.id]
    assert {label.rim_number for label in inschiet} == {999}
    assert len(inschiet) == 2
    assert len(all_pending) == 3 + 1
    assert await _all(db_session_clean, queries.inschiet_labels(other.id)) == []


@pytest.mark.asyncio
async def test_processing_order_puts_inschiet_last(factory, db_session_clean):
    order = await factory.order(po_number=12, total_sheets=2500)

    labels = await _all(db_session_clean, queries.processing_order(queries.labels_for_order(order.id)))

    assert [(label.rim_number, label.cut_side.value) for label in labels] == [
        (1, "left"),
        (1, "right"),
        (2, "left"),
        (2, "right"),
        (999, "left"),
        (999, "right"),
    ]


@pytest.mark.asyncio
async def test_user_and_workstation_scopes(factory, db_session_clean):
    await factory.admin()
    await factory.user(np="OP1")
    await factory.user(np="OP2", is_active=False)
    await factory.workstation("Team 1")
    await factory.workstation("Team 2", is_active=False)

    active = await _all(db_session_clean, queries.active_users())
    admins = await _all(db_session_clean, queries.admin_users())
    operators = await _all(db_session_clean, queries.operator_users())
    workstations = await _all(db_session_clean, queries.active_workstations())

    assert sorted(user.np for user in active) == ["ADMIN", "OP1"]
    assert [user.role for user in admins] == [UserRole.ADMIN]
    assert sorted(user.np for user in operators) == ["OP1", "OP2"]
    assert [ws.name for ws in workstations] == ["Team 1"]
