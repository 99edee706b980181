from decimal import Decimal

from flask import request


def num(v) -> float:
    """Decimal/Numeric -> float seguro para JSON."""
    try:
        return float(Decimal(str(v)))
    except Exception:
        return float(v or 0)


def iso(v):
    return v.isoformat() if v else None


def branch_json(b):
    return {
        "id": b.id,
        "name": b.name,
        "code": b.code,
        "address": b.address,
        "is_central": b.is_central,
        "is_active": b.is_active,
    }


def product_json(p, authorized: bool | None = None):
    out = {
        "id": p.id,
        "barcode": p.barcode,
        "name": p.name,
        "description": p.description,
        "category": p.category,
        "unit": p.unit,
        "requires_barcode": p.requires_barcode,
    }
    if authorized is not None:
        out["authorized"] = authorized
    return out


def order_json(o, product_map=None, branch_map=None):
    product = (product_map or {}).get(o.product_id)
    branch = (branch_map or {}).get(o.branch_id)
    return {
        "id": o.id,
        "branch_id": o.branch_id,
        "branch_name": branch.name if branch else None,
        "product_id": o.product_id,
        "product_name": product.name if product else None,
        "quantity": num(o.quantity),
        "requested_by": o.requested_by_user_id,
        "status": o.status,
        "justification": o.justification,
        "created_at": iso(o.created_at),
        "approved_by": o.approved_by_user_id,
        "approved_at": iso(o.approved_at),
    }


def shipment_json(s, product_map=None, branch_map=None):
    product = (product_map or {}).get(s.product_id)
    branch = (branch_map or {}).get(s.branch_id)
    return {
        "id": s.id,
        "branch_id": s.branch_id,
        "branch_name": branch.name if branch else None,
        "product_id": s.product_id,
        "product_name": product.name if product else None,
        "quantity": num(s.quantity),
        "sent_by": s.sent_by_user_id,
        "status": s.status,
        "notes": s.notes,
        "sent_at": iso(s.sent_at),
        "received_at": iso(s.received_at),
    }


def inventory_json(inv, product_map=None):
    product = (product_map or {}).get(inv.product_id)
    return {
        "product_id": inv.product_id,
        "product_name": product.name if product else None,
        "unit": product.unit if product else None,
        "location_type": inv.location_type,
        "location_id": inv.location_id,
        "qty": num(inv.qty),
        "unit_price": num(inv.unit_price),
        "updated_at": iso(inv.updated_at),
    }


def totals_json(t: dict) -> dict:
    return {
        "item_count": t["item_count"],
        "total_items": num(t["total_items"]),
        "total_value": num(t["total_value"]),
        "low_stock_count": t["low_stock_count"],
    }


def purchase_json(p):
    return {
        "id": p.id,
        "product_id": p.product_id,
        "quantity": num(p.quantity),
        "unit_price": num(p.unit_price),
        "total_price": num(p.total_price),
        "supplier": p.supplier,
        "purchase_date": iso(p.purchase_date),
        "received_by": p.received_by_user_id,
    }


def consumption_json(c):
    return {
        "id": c.id,
        "product_id": c.product_id,
        "branch_id": c.branch_id,
        "quantity": num(c.quantity),
        "consumed_by": c.consumed_by,
        "consumed_by_cpf": c.consumed_by_cpf,
        "unit_price": num(c.unit_price),
        "total_price": num(c.total_price),
        "consumed_at": iso(c.consumed_at),
    }


def vehicle_json(v):
    return {
        "id": v.id,
        "branch_id": v.branch_id,
        "plate": v.plate,
        "model": v.model,
        "odometer": v.odometer,
    }


def boat_json(b):
    return {
        "id": b.id,
        "branch_id": b.branch_id,
        "name": b.name,
        "registration": b.registration,
        "model": b.model,
        "engine_hours": num(b.engine_hours),
    }


def refueling_json(r):
    out = {
        "id": r.id,
        "branch_id": r.branch_id,
        "liters": num(r.liters),
        "price_per_liter": num(r.price_per_liter),
        "total_price": num(r.total_price),
        "fueled_by": r.fueled_by,
        "fueled_at": iso(r.fueled_at),
    }
    if hasattr(r, "vehicle_id"):
        out.update(vehicle_id=r.vehicle_id, odometer=r.odometer)
    else:
        out.update(boat_id=r.boat_id, engine_hours=num(r.engine_hours), notes=r.notes)
    return out


def request_data() -> dict:
    """Corpo JSON ou formulário, indistintamente."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    return str(v or "").strip().lower() in ("1", "true", "on", "sim", "yes")


def to_int(v, default: int = 0) -> int:
    try:
        return int(str(v).strip())
    except (TypeError, ValueError):
        return default


def lookup_maps(db):
    """Produtos e filiais por id, para nomear linhas das listagens."""
    from models.branch import Branch
    from models.product import Product

    product_map = {p.id: p for p in db.session.query(Product).all()}
    branch_map = {b.id: b for b in db.session.query(Branch).all()}
    return product_map, branch_map
