from decimal import Decimal, InvalidOperation
from typing import Optional
from sqlalchemy.orm import Session

from models.inventory import Inventory, LocationType
from models.movement import StockMovement, MoveType

# Abaixo disso o item conta como "estoque baixo"
LOW_STOCK_THRESHOLD = Decimal("20")

# Numeric(14, 3): até 11 dígitos inteiros
MAX_QTY = Decimal("100000000000")


def clean_str(v) -> str:
    return str(v).strip() if v is not None else ""


def to_qty(val) -> Decimal:
    """
    Aceita quantidades com vírgula/ponto. Devolve Decimal(14,3) >= 0.
    Texto inválido vira zero; valor grande demais para a coluna é erro.
    """
    if val is None:
        return Decimal("0")
    s = str(val).strip().replace(",", ".")
    try:
        d = Decimal(s)
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not d.is_finite() or d < 0:
        return Decimal("0")
    if d >= MAX_QTY:
        raise ValueError("Quantidade fora do limite permitido.")
    try:
        return d.quantize(Decimal("0.001"))
    except InvalidOperation:
        raise ValueError("Quantidade fora do limite permitido.")


def to_money(val) -> Decimal:
    return to_qty(val).quantize(Decimal("0.01"))


def parse_price(val, label: str = "Preço unitário") -> Decimal:
    """Preço digitado: vazio, texto inválido, zero ou negativo é recusado."""
    raw = clean_str(val).replace(",", ".")
    if not raw:
        raise ValueError(f"Informe o {label.lower()}.")
    try:
        d = Decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValueError(f"{label} inválido.")
    if not d.is_finite() or d <= 0:
        raise ValueError(f"{label} deve ser maior que zero.")
    return to_money(d)


def find_inventory(
    db: Session,
    *,
    product_id: int,
    location_type: str,
    location_id: int
) -> Optional[Inventory]:
    return (
        db.query(Inventory)
        .filter_by(
            product_id=product_id,
            location_type=location_type,
            location_id=location_id,
        )
        .first()
    )


def get_or_create_inventory(
    db: Session,
    *,
    product_id: int,
    location_type: str,
    location_id: int
) -> Inventory:
    inv = find_inventory(
        db,
        product_id=product_id,
        location_type=location_type,
        location_id=location_id,
    )
    if not inv:
        inv = Inventory(
            product_id=product_id,
            location_type=location_type,
            location_id=location_id,
            qty=Decimal("0.000"),
            unit_price=Decimal("0.00"),
        )
        db.add(inv)
        db.flush()
    return inv


def get_stock(db: Session, *, product_id: int, location_type: str, location_id: int) -> Decimal:
    inv = find_inventory(db, product_id=product_id, location_type=location_type, location_id=location_id)
    return to_qty(inv.qty) if inv else Decimal("0.000")


def list_location_inventory(db: Session, *, location_type: str, location_id: int) -> list[Inventory]:
    return (
        db.query(Inventory)
        .filter(Inventory.location_type == location_type, Inventory.location_id == location_id)
        .order_by(Inventory.product_id.asc())
        .all()
    )


def add_stock(
    db: Session,
    *,
    product_id: int,
    location_type: str,
    location_id: int,
    qty,
    move_type: str,
    note: Optional[str] = None,
    unit_cost=None,
    user_id: Optional[int] = None
):
    """
    Soma estoque num local (compra/entrada).
    Com unit_cost, recalcula o preço unitário pela média ponderada.
    Registra movimentação: from_=None -> to_=local
    """
    if location_type not in LocationType.ALL:
        raise ValueError("location_type inválido")

    if move_type not in MoveType.ALL:
        raise ValueError("move_type inválido")

    q = to_qty(qty)
    if q <= 0:
        raise ValueError("Quantidade deve ser maior que zero")

    inv = get_or_create_inventory(
        db,
        product_id=product_id,
        location_type=location_type,
        location_id=location_id,
    )

    current = to_qty(inv.qty)
    if unit_cost is not None:
        cost = to_money(unit_cost)
        old_value = current * to_money(inv.unit_price)
        inv.unit_price = ((old_value + q * cost) / (current + q)).quantize(Decimal("0.01"))

    inv.qty = current + q

    mv = StockMovement(
        product_id=product_id,
        move_type=move_type,
        from_location_type=None,
        from_location_id=None,
        to_location_type=location_type,
        to_location_id=location_id,
        qty=q,
        unit_cost=to_money(unit_cost) if unit_cost is not None else None,
        note=note,
        user_id=user_id,
    )
    db.add(mv)
    db.flush()
    return inv, mv


def remove_stock(
    db: Session,
    *,
    product_id: int,
    location_type: str,
    location_id: int,
    qty,
    move_type: str,
    note: Optional[str] = None,
    user_id: Optional[int] = None
):
    """
    Baixa estoque num local (consumo).
    Registra movimentação: from_=local -> to_=None
    """
    if location_type not in LocationType.ALL:
        raise ValueError("location_type inválido")

    if move_type not in MoveType.ALL:
        raise ValueError("move_type inválido")

    q = to_qty(qty)
    if q <= 0:
        raise ValueError("Quantidade deve ser maior que zero")

    inv = find_inventory(
        db,
        product_id=product_id,
        location_type=location_type,
        location_id=location_id,
    )

    current = to_qty(inv.qty) if inv else Decimal("0.000")
    if current < q:
        raise ValueError(f"Estoque insuficiente. Disponível={current} solicitado={q}")

    inv.qty = current - q

    mv = StockMovement(
        product_id=product_id,
        move_type=move_type,
        from_location_type=location_type,
        from_location_id=location_id,
        to_location_type=None,
        to_location_id=None,
        qty=q,
        note=note,
        user_id=user_id,
    )
    db.add(mv)
    db.flush()
    return inv, mv


def is_low_stock(inv: Inventory) -> bool:
    return to_qty(inv.qty) < LOW_STOCK_THRESHOLD


def inventory_totals(items: list[Inventory]) -> dict:
    """Totais de uma listagem de estoque: quantidade, valor e itens abaixo do mínimo."""
    total_qty = sum((to_qty(i.qty) for i in items), Decimal("0.000"))
    total_value = sum((to_qty(i.qty) * to_money(i.unit_price) for i in items), Decimal("0.00"))
    return {
        "item_count": len(items),
        "total_items": total_qty,
        "total_value": total_value.quantize(Decimal("0.01")),
        "low_stock_count": sum(1 for i in items if is_low_stock(i)),
    }
