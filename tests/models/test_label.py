import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from label_tracker.core.exceptions import InvalidStateError
from label_tracker.models import Label, ProductionOrder
from label_tracker.models.enums import CutSide, LabelState, OrderType


def test_fresh_label_is_pending():
    label = Label(production_order_id=1, rim_number=1, cut_side=CutSide.LEFT)

    assert label.state is LabelState.PENDING
    assert not label.is_in_progress
    assert not label.is_completed


def test_start_then_finish_inspection():
    label = Label(production_order_id=1, rim_number=1, cut_side=CutSide.LEFT)

    label.start_inspection("A1234", workstation_id=3)
    assert label.is_in_progress
    assert not label.is_completed
    assert label.inspector_np == "A1234"
    assert label.workstation_id == 3
    assert label.started_at is not None

    label.finish_inspection(second_inspector_np="B5678")
    assert label.is_completed
    assert not label.is_in_progress
    assert label.inspector_2_np == "B5678"
    assert label.finished_at >= label.started_at


def test_finish_without_start_is_rejected():
    label = Label(production_order_id=1, rim_number=1, cut_side=CutSide.LEFT)

    with pytest.raises(InvalidStateError):
        label.finish_inspection()

    assert label.finished_at is None
    assert label.is_pending


def test_restart_is_rejected():
    label = Label(production_order_id=1, rim_number=1, cut_side=CutSide.RIGHT)
    label.start_inspection("A1234")

    with pytest.raises(InvalidStateError):
        label.start_inspection("B5678")

    assert label.inspector_np == "A1234"


async def _order(db, po_number=5001, order_type=OrderType.REGULAR) -> ProductionOrder:
    order = ProductionOrder(
        po_number=po_number,
        order_type=order_type,
        total_sheets=2000,
        total_rims=2,
        start_rim=1,
        end_rim=2,
        inschiet_sheets=0,
    )
    db.add(order)
    await db.commit()
    return order


@pytest.mark.asyncio
async def test_duplicate_label_triple_is_rejected(db_session, clean_db):
    order = await _order(db_session)
    db_session.add(Label(production_order_id=order.id, rim_number=1, cut_side=CutSide.LEFT))
    await db_session.commit()

    db_session.add(Label(production_order_id=order.id, rim_number=1, cut_side=CutSide.LEFT))
    with pytest.raises(IntegrityError):
        await db_session.commit()

    await db_session.rollback()


@pytest.mark.asyncio
async def test_same_rim_different_side_is_allowed(db_session, clean_db):
    order = await _order(db_session)
    db_session.add_all([
        Label(production_order_id=order.id, rim_number=1, cut_side=CutSide.LEFT),
        Label(production_order_id=order.id, rim_number=1, cut_side=CutSide.RIGHT),
    ])
    await db_session.commit()

    result = await db_session.execute(select(Label).where(Label.production_order_id == order.id))
    assert len(result.scalars().all()) == 2


@pytest.mark.asyncio
async def test_label_state_survives_round_trip(db_session, clean_db):
    order = await _order(db_session)
    label = Label(production_order_id=order.id, rim_number=2, cut_side=CutSide.LEFT)
    db_session.add(label)
    await db_session.commit()

    label.start_inspection("A1234")
    await db_session.commit()
    db_session.expunge_all()

    stored = (await db_session.execute(select(Label).where(Label.id == label.id))).scalar_one()
    assert stored.state is LabelState.IN_PROGRESS
    assert stored.cut_side is CutSide.LEFT
