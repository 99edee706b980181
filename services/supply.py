from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models.consumption import Consumption
from models.inventory import LocationType
from models.movement import MoveType
from models.purchase import Purchase
from services.catalog import get_active_branch, get_active_product, get_central_branch
from services.stock import (
    add_stock,
    clean_str,
    find_inventory,
    parse_price,
    remove_stock,
    to_money,
    to_qty,
)


def _only_digits(v) -> str:
    return "".join(ch for ch in clean_str(v) if ch.isdigit())


def register_purchase(
    db: Session,
    *,
    product_id: int,
    quantity,
    unit_price,
    supplier: Optional[str] = None,
    purchase_date: Optional[date] = None,
    user_id: Optional[int] = None
) -> Purchase:
    """
    Compra recebida na Central: entra no estoque da Central e
    atualiza o preço médio do item.
    """
    product = get_active_product(db, product_id)
    central = get_central_branch(db)

    q = to_qty(quantity)
    if q <= 0:
        raise ValueError("Quantidade deve ser maior que zero.")
    price = parse_price(unit_price)

    purchase = Purchase(
        product_id=product.id,
        quantity=q,
        unit_price=price,
        total_price=(q * price).quantize(Decimal("0.01")),
        supplier=clean_str(supplier) or None,
        purchase_date=purchase_date or date.today(),
        received_by_user_id=user_id,
    )
    db.add(purchase)

    add_stock(
        db,
        product_id=product.id,
        location_type=LocationType.WAREHOUSE,
        location_id=central.id,
        qty=q,
        move_type=MoveType.PURCHASE_IN,
        note=f"Compra {purchase.supplier or ''}".strip(),
        unit_cost=price,
        user_id=user_id,
    )
    db.flush()
    return purchase


def list_purchases(db: Session, *, product_id: Optional[int] = None) -> list[Purchase]:
    q = db.query(Purchase)
    if product_id:
        q = q.filter(Purchase.product_id == product_id)
    return q.order_by(Purchase.created_at.desc(), Purchase.id.desc()).limit(500).all()


def register_consumption(
    db: Session,
    *,
    branch_id: int,
    product_id: int,
    quantity,
    consumed_by: str,
    consumed_by_cpf: str,
    user_id: Optional[int] = None
) -> Consumption:
    """
    Consumo na filial: baixa o estoque da filial e registra quem retirou.
    Valor calculado pelo preço unitário do estoque da filial.
    """
    branch = get_active_branch(db, branch_id)
    product = get_active_product(db, product_id)

    consumed_by = clean_str(consumed_by)
    cpf = _only_digits(consumed_by_cpf)
    if not consumed_by:
        raise ValueError("Informe quem consumiu o item.")
    if len(cpf) != 11:
        raise ValueError("CPF deve ter 11 dígitos.")

    location_type = LocationType.WAREHOUSE if branch.is_central else LocationType.BRANCH
    inv = find_inventory(db, product_id=product.id, location_type=location_type, location_id=branch.id)
    unit_price = to_money(inv.unit_price) if inv else Decimal("0.00")

    _, mv = remove_stock(
        db,
        product_id=product.id,
        location_type=location_type,
        location_id=branch.id,
        qty=quantity,
        move_type=MoveType.CONSUMPTION_OUT,
        note=f"Consumo por {consumed_by}",
        user_id=user_id,
    )

    consumption = Consumption(
        product_id=product.id,
        branch_id=branch.id,
        quantity=mv.qty,
        consumed_by=consumed_by,
        consumed_by_cpf=cpf,
        unit_price=unit_price,
        total_price=(to_qty(mv.qty) * unit_price).quantize(Decimal("0.01")),
        registered_by_user_id=user_id,
        consumed_at=datetime.utcnow(),
    )
    db.add(consumption)
    db.flush()
    return consumption


def list_consumptions(db: Session, *, branch_id: Optional[int] = None) -> list[Consumption]:
    q = db.query(Consumption)
    if branch_id:
        q = q.filter(Consumption.branch_id == branch_id)
    return q.order_by(Consumption.consumed_at.desc(), Consumption.id.desc()).limit(500).all()
