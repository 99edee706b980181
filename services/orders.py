from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.inventory import LocationType
from models.order import Order, OrderStatus
from models.shipment import DirectShipment, ShipmentStatus
from services.catalog import (
    get_active_branch,
    get_active_product,
    get_central_branch,
    is_product_authorized,
)
from services.errors import InvalidStateError, NotFoundError
from services.stock import clean_str, find_inventory, to_qty


def _parse_quantity(quantity):
    q = to_qty(quantity)
    if q <= 0:
        raise ValueError("Quantidade deve ser maior que zero.")
    return q


# -------------------------
# Pedidos (filial -> Central)
# -------------------------
def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if not order:
        raise NotFoundError("Pedido não encontrado.")
    return order


def create_order(
    db: Session,
    *,
    branch_id: int,
    product_id: int,
    quantity,
    requested_by: Optional[int] = None,
    justification: Optional[str] = None
) -> Order:
    """
    Novo pedido de reposição, sempre em 'pendente'.

    Item não homologado para a filial ainda pode ser pedido (o aviso é só
    informativo), mas exige justificativa.
    """
    branch = get_active_branch(db, branch_id)
    if branch.is_central:
        raise ValueError("A Central não faz pedidos de reposição.")
    get_active_product(db, product_id)

    q = _parse_quantity(quantity)
    justification = clean_str(justification) or None

    if not justification and not is_product_authorized(db, branch_id=branch_id, product_id=product_id):
        raise ValueError("Item não homologado para a filial: informe uma justificativa.")

    order = Order(
        branch_id=branch_id,
        product_id=product_id,
        quantity=q,
        requested_by_user_id=requested_by,
        status=OrderStatus.PENDING,
        justification=justification,
        created_at=datetime.utcnow(),
    )
    db.add(order)
    db.flush()
    return order


def approve_order(db: Session, *, order_id: int, approved_by: Optional[int] = None) -> Order:
    order = get_order(db, order_id)
    if order.status != OrderStatus.PENDING:
        raise InvalidStateError(f"Só é possível aprovar pedidos pendentes (status atual: {order.status}).")

    order.status = OrderStatus.APPROVED
    order.approved_by_user_id = approved_by
    order.approved_at = datetime.utcnow()
    db.flush()
    return order


def reject_order(db: Session, *, order_id: int, reason: Optional[str]) -> Order:
    order = get_order(db, order_id)
    if order.status != OrderStatus.PENDING:
        raise InvalidStateError(f"Só é possível rejeitar pedidos pendentes (status atual: {order.status}).")

    reason = clean_str(reason)
    if not reason:
        raise ValueError("Informe o motivo da rejeição.")

    order.status = OrderStatus.REJECTED
    order.justification = reason
    db.flush()
    return order


def list_orders(db: Session, *, branch_id: Optional[int] = None, status: Optional[str] = None) -> list[Order]:
    """Mais recentes primeiro. branch_id=None => todas as filiais (admin)."""
    q = db.query(Order)
    if branch_id:
        q = q.filter(Order.branch_id == branch_id)
    if status:
        if status not in OrderStatus.ALL:
            raise ValueError("Status de pedido inválido.")
        q = q.filter(Order.status == status)
    return q.order_by(Order.created_at.desc(), Order.id.desc()).all()


def order_summary(db: Session, *, branch_id: Optional[int] = None) -> dict:
    q = db.query(Order.status, func.count(Order.id))
    if branch_id:
        q = q.filter(Order.branch_id == branch_id)
    counts = dict(q.group_by(Order.status).all())
    return {s: int(counts.get(s, 0)) for s in (
        OrderStatus.PENDING,
        OrderStatus.APPROVED,
        OrderStatus.REJECTED,
        OrderStatus.SENT,
        OrderStatus.RECEIVED,
    )}


# -------------------------
# Envios diretos (Central -> filial)
# -------------------------
def get_shipment(db: Session, shipment_id: int) -> DirectShipment:
    shipment = db.get(DirectShipment, shipment_id)
    if not shipment:
        raise NotFoundError("Envio não encontrado.")
    return shipment


def create_shipment(
    db: Session,
    *,
    branch_id: int,
    product_id: int,
    quantity,
    sent_by: Optional[int] = None,
    notes: Optional[str] = None,
    confirm_not_in_central: bool = False
) -> DirectShipment:
    """
    Envio direto da Central para uma filial, sem pedido prévio.

    Não baixa estoque da Central: o saldo só é usado para validar a quantidade.
    Produto sem registro no estoque da Central exige confirmação explícita.
    """
    branch = get_active_branch(db, branch_id)
    if branch.is_central:
        raise ValueError("Selecione uma filial de destino (não a Central).")
    get_active_product(db, product_id)

    q = _parse_quantity(quantity)

    central = get_central_branch(db)
    inv = find_inventory(
        db,
        product_id=product_id,
        location_type=LocationType.WAREHOUSE,
        location_id=central.id,
    )
    if inv is None:
        if not confirm_not_in_central:
            raise ValueError("Produto sem estoque registrado na Central. Confirme para enviar mesmo assim.")
    else:
        available = to_qty(inv.qty)
        if available > 0 and q > available:
            raise ValueError(f"Estoque insuficiente na Central. Disponível={available} solicitado={q}")

    shipment = DirectShipment(
        branch_id=branch_id,
        product_id=product_id,
        quantity=q,
        sent_by_user_id=sent_by,
        status=ShipmentStatus.IN_TRANSIT,
        notes=clean_str(notes) or None,
        sent_at=datetime.utcnow(),
    )
    db.add(shipment)
    db.flush()
    return shipment


def receive_shipment(db: Session, *, shipment_id: int) -> DirectShipment:
    shipment = get_shipment(db, shipment_id)
    if shipment.status != ShipmentStatus.IN_TRANSIT:
        raise InvalidStateError("Este envio já foi recebido.")

    shipment.status = ShipmentStatus.RECEIVED
    shipment.received_at = datetime.utcnow()
    db.flush()
    return shipment


def list_shipments(
    db: Session,
    *,
    branch_id: Optional[int] = None,
    status: Optional[str] = None
) -> list[DirectShipment]:
    q = db.query(DirectShipment)
    if branch_id:
        q = q.filter(DirectShipment.branch_id == branch_id)
    if status:
        if status not in ShipmentStatus.ALL:
            raise ValueError("Status de envio inválido.")
        q = q.filter(DirectShipment.status == status)
    return q.order_by(DirectShipment.sent_at.desc(), DirectShipment.id.desc()).all()


def shipment_summary(db: Session, *, branch_id: Optional[int] = None) -> dict:
    q = db.query(DirectShipment.status, func.count(DirectShipment.id))
    if branch_id:
        q = q.filter(DirectShipment.branch_id == branch_id)
    counts = dict(q.group_by(DirectShipment.status).all())
    return {
        "total": int(sum(counts.values())),
        ShipmentStatus.IN_TRANSIT: int(counts.get(ShipmentStatus.IN_TRANSIT, 0)),
        ShipmentStatus.RECEIVED: int(counts.get(ShipmentStatus.RECEIVED, 0)),
    }
