from decimal import Decimal

import pytest

from models import db
from models.inventory import LocationType
from models.shipment import ShipmentStatus
from services.errors import InvalidStateError, NotFoundError
from services.orders import create_shipment, list_shipments, receive_shipment, shipment_summary
from services.stock import get_stock


def _central_stock(data, product_id):
    return get_stock(db.session, product_id=product_id, location_type=LocationType.WAREHOUSE, location_id=data.central)


def test_create_shipment_in_transit(data):
    shipment = create_shipment(
        db.session, branch_id=data.b1, product_id=data.p1, quantity=12, sent_by=data.admin, notes=" Urgente "
    )

    assert shipment.status == ShipmentStatus.IN_TRANSIT
    assert shipment.quantity == Decimal("12")
    assert shipment.sent_by_user_id == data.admin
    assert shipment.notes == "Urgente"
    assert shipment.sent_at is not None
    assert shipment.received_at is None


def test_shipment_does_not_deduct_central_stock(data):
    before = _central_stock(data, data.p1)
    create_shipment(db.session, branch_id=data.b1, product_id=data.p1, quantity=40)
    db.session.commit()

    assert _central_stock(data, data.p1) == before == Decimal("100")


def test_shipment_above_central_stock_is_refused(data):
    with pytest.raises(ValueError, match="insuficiente"):
        create_shipment(db.session, branch_id=data.b1, product_id=data.p2, quantity=31)

    shipment = create_shipment(db.session, branch_id=data.b1, product_id=data.p2, quantity=30)
    assert shipment.status == ShipmentStatus.IN_TRANSIT


def test_product_missing_from_central_needs_confirmation(data):
    with pytest.raises(ValueError, match="Confirme"):
        create_shipment(db.session, branch_id=data.b2, product_id=data.p3, quantity=5)

    shipment = create_shipment(
        db.session, branch_id=data.b2, product_id=data.p3, quantity=5, confirm_not_in_central=True
    )
    assert shipment.status == ShipmentStatus.IN_TRANSIT


def test_shipment_to_central_is_refused(data):
    with pytest.raises(ValueError):
        create_shipment(db.session, branch_id=data.central, product_id=data.p1, quantity=1)


def test_shipment_to_unknown_branch(data):
    with pytest.raises(NotFoundError):
        create_shipment(db.session, branch_id=999, product_id=data.p1, quantity=1)


def test_receive_shipment(data):
    shipment = create_shipment(db.session, branch_id=data.b1, product_id=data.p1, quantity=2)

    received = receive_shipment(db.session, shipment_id=shipment.id)
    assert received.status == ShipmentStatus.RECEIVED
    assert received.received_at is not None

    with pytest.raises(InvalidStateError):
        receive_shipment(db.session, shipment_id=shipment.id)


def test_list_and_summary(data):
    s1 = create_shipment(db.session, branch_id=data.b1, product_id=data.p1, quantity=1)
    s2 = create_shipment(db.session, branch_id=data.b2, product_id=data.p1, quantity=1)
    s3 = create_shipment(db.session, branch_id=data.b1, product_id=data.p2, quantity=1)
    receive_shipment(db.session, shipment_id=s1.id)
    db.session.commit()

    assert [s.id for s in list_shipments(db.session)] == [s3.id, s2.id, s1.id]
    assert [s.id for s in list_shipments(db.session, branch_id=data.b1)] == [s3.id, s1.id]
    assert [s.id for s in list_shipments(db.session, status=ShipmentStatus.IN_TRANSIT)] == [s3.id, s2.id]

    summary = shipment_summary(db.session)
    assert summary == {"total": 3, ShipmentStatus.IN_TRANSIT: 2, ShipmentStatus.RECEIVED: 1}
    assert shipment_summary(db.session, branch_id=data.b2)["total"] == 1
