from decimal import Decimal

import pytest

from models import db
from models.order import Order, OrderStatus
from services.errors import InvalidStateError, NotFoundError
from services.orders import approve_order, create_order, list_orders, order_summary, reject_order


def test_create_order_is_pending(data):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=10, requested_by=data.op1)

    assert order.id is not None
    assert order.status == OrderStatus.PENDING
    assert order.quantity == Decimal("10")
    assert order.requested_by_user_id == data.op1
    assert order.created_at is not None
    assert order.approved_at is None
    assert order.approved_by_user_id is None


def test_create_order_accepts_comma_decimal(data):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity="2,5")
    assert order.quantity == Decimal("2.5")


@pytest.mark.parametrize("quantity", [0, "-3", "abc", None])
def test_create_order_rejects_non_positive_quantity(data, quantity):
    with pytest.raises(ValueError):
        create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=quantity)


def test_unauthorized_product_requires_justification(data):
    with pytest.raises(ValueError, match="justificativa"):
        create_order(db.session, branch_id=data.b1, product_id=data.p2, quantity=1)

    order = create_order(
        db.session,
        branch_id=data.b1,
        product_id=data.p2,
        quantity=1,
        justification="  Surto de gripe na unidade  ",
    )
    assert order.status == OrderStatus.PENDING
    assert order.justification == "Surto de gripe na unidade"


def test_central_cannot_place_orders(data):
    with pytest.raises(ValueError):
        create_order(db.session, branch_id=data.central, product_id=data.p1, quantity=1)


def test_create_order_unknown_product(data):
    with pytest.raises(NotFoundError):
        create_order(db.session, branch_id=data.b1, product_id=9999, quantity=1)


def test_approve_sets_approver_and_timestamp(data):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=10)

    approved = approve_order(db.session, order_id=order.id, approved_by=data.admin)

    assert approved.status == OrderStatus.APPROVED
    assert approved.approved_by_user_id == data.admin
    assert approved.approved_at is not None


@pytest.mark.parametrize("first", ["approve", "reject"])
def test_approve_non_pending_is_invalid_and_unchanged(data, first):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=3)
    if first == "approve":
        approve_order(db.session, order_id=order.id, approved_by=data.admin)
    else:
        reject_order(db.session, order_id=order.id, reason="Sem verba")
    before = (order.status, order.approved_at, order.approved_by_user_id, order.justification)

    with pytest.raises(InvalidStateError):
        approve_order(db.session, order_id=order.id, approved_by=data.op2)
    with pytest.raises(InvalidStateError):
        reject_order(db.session, order_id=order.id, reason="Outro motivo")

    assert (order.status, order.approved_at, order.approved_by_user_id, order.justification) == before


def test_reject_stores_reason(data):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=4)

    rejected = reject_order(db.session, order_id=order.id, reason="Estoque da Central comprometido")

    assert rejected.status == OrderStatus.REJECTED
    assert rejected.justification == "Estoque da Central comprometido"
    assert rejected.approved_at is None


def test_reject_overwrites_original_justification(data):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p2, quantity=1, justification="Urgente")
    reject_order(db.session, order_id=order.id, reason="Item controlado")
    assert order.justification == "Item controlado"


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_reject_requires_reason(data, reason):
    order = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=4)

    with pytest.raises(ValueError):
        reject_order(db.session, order_id=order.id, reason=reason)
    assert order.status == OrderStatus.PENDING


def test_approve_missing_order(data):
    with pytest.raises(NotFoundError):
        approve_order(db.session, order_id=12345)


def test_list_orders_scoped_by_branch_newest_first(data):
    o1 = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    o2 = create_order(db.session, branch_id=data.b2, product_id=data.p1, quantity=2)
    o3 = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=3)
    db.session.commit()

    assert [o.id for o in list_orders(db.session, branch_id=data.b1)] == [o3.id, o1.id]
    assert [o.id for o in list_orders(db.session, branch_id=data.b2)] == [o2.id]
    assert [o.id for o in list_orders(db.session)] == [o3.id, o2.id, o1.id]


def test_list_orders_by_status(data):
    o1 = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=2)
    approve_order(db.session, order_id=o1.id)

    approved = list_orders(db.session, status=OrderStatus.APPROVED)
    assert [o.id for o in approved] == [o1.id]

    with pytest.raises(ValueError):
        list_orders(db.session, status="cancelado")


def test_order_summary_counts(data):
    o1 = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    o2 = create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    create_order(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    create_order(db.session, branch_id=data.b2, product_id=data.p1, quantity=1)
    approve_order(db.session, order_id=o1.id)
    reject_order(db.session, order_id=o2.id, reason="Duplicado")

    b1 = order_summary(db.session, branch_id=data.b1)
    assert b1[OrderStatus.PENDING] == 1
    assert b1[OrderStatus.APPROVED] == 1
    assert b1[OrderStatus.REJECTED] == 1
    assert b1[OrderStatus.SENT] == 0

    everything = order_summary(db.session)
    assert everything[OrderStatus.PENDING] == 2
    assert db.session.query(Order).count() == 4
