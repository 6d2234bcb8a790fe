import pytest
from sqlalchemy import func, select

from label_tracker.models import Label, ProductionOrder, User
from label_tracker.models.enums import OrderType


@pytest.mark.asyncio
async def test_order_delete_removes_its_labels(factory, db_session_clean):
    order = await factory.order(po_number=2001, total_sheets=2000)
    other = await factory.order(po_number=2002, total_sheets=1000)

    await db_session_clean.delete(order)
    await db_session_clean.commit()

    remaining = await db_session_clean.execute(select(func.count(Label.id)))
    # only the two labels of the other order are left
    assert remaining.scalar_one() == 2
    assert await db_session_clean.get(ProductionOrder, other.id) is not None


@pytest.mark.asyncio
async def test_workstation_delete_detaches_orders_and_labels(factory, db_session_clean):
    team = await factory.workstation("Team 4")
    order = await factory.order(po_number=3001, total_sheets=1000, order_type=OrderType.MMEA, team=team)
    label = (await db_session_clean.execute(select(Label).where(Label.production_order_id == order.id))).scalar_one()
    label.workstation_id = team.id
    user = await factory.user(np="OP777", workstation=team)

    await db_session_clean.delete(team)
    await db_session_clean.commit()
    db_session_clean.expunge_all()

    stored_order = await db_session_clean.get(ProductionOrder, order.id)
    stored_label = await db_session_clean.get(Label, label.id)
    stored_user = await db_session_clean.get(User, user.id)
    assert stored_order is not None and stored_order.team_id is None
    assert stored_label is not None and stored_label.workstation_id is None
    assert stored_user is not None and stored_user.workstation_id is None


@pytest.mark.asyncio
async def test_order_derived_properties(factory):
    regular = await factory.order(po_number=4001, total_sheets=10500)
    mmea = await factory.order(po_number=4002, total_sheets=10500, order_type=OrderType.MMEA)

    assert regular.total_rims == 10
    assert regular.inschiet_sheets == 500
    assert regular.has_inschiet
    assert regular.is_regular and not regular.is_mmea
    assert not regular.is_completed

    assert mmea.total_rims == 10
    assert mmea.inschiet_sheets == 0
    assert not mmea.has_inschiet
    assert mmea.is_mmea
