from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.inventory import LocationType
from models.user import Role
from routes.guards import require_roles, requested_branch_id, scoped_branch_id
from routes.serializers import (
    consumption_json,
    inventory_json,
    lookup_maps,
    num,
    purchase_json,
    request_data,
    to_int,
    totals_json,
)
from services.catalog import get_active_branch, get_central_branch, list_branches
from services.stock import LOW_STOCK_THRESHOLD, inventory_totals, is_low_stock, list_location_inventory
from services.supply import list_consumptions, list_purchases, register_consumption, register_purchase

inventory_bp = Blueprint("inventory", __name__, url_prefix="/inventory")


def _parse_date(v):
    raw = (v or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValueError("Data inválida (use AAAA-MM-DD).")


# -------------------------
# Estoque
# -------------------------
@inventory_bp.get("/central")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def central_stock():
    central = get_central_branch(db.session)
    items = list_location_inventory(db.session, location_type=LocationType.WAREHOUSE, location_id=central.id)
    product_map, _ = lookup_maps(db)
    return jsonify({
        "ok": True,
        "branch_id": central.id,
        "items": [inventory_json(i, product_map) for i in items],
        "totals": totals_json(inventory_totals(items)),
    })


@inventory_bp.get("/branch")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def branch_stock():
    branch_id = scoped_branch_id(requested_branch_id())
    if not branch_id:
        raise ValueError("Selecione uma filial (branch_id).")

    branch = get_active_branch(db.session, branch_id)
    location_type = LocationType.WAREHOUSE if branch.is_central else LocationType.BRANCH
    items = list_location_inventory(db.session, location_type=location_type, location_id=branch.id)
    totals = inventory_totals(items)

    only_low = (request.args.get("low") or "").strip() == "1"
    if only_low:
        items = [i for i in items if is_low_stock(i)]

    product_map, _ = lookup_maps(db)
    return jsonify({
        "ok": True,
        "branch_id": branch.id,
        "items": [inventory_json(i, product_map) for i in items],
        "totals": totals_json(totals),
    })


@inventory_bp.get("/overview")
@login_required
@require_roles(Role.ADMIN)
def branches_overview():
    """Resumo do estoque de cada filial ativa (visão da Central)."""
    rows = []
    for branch in list_branches(db.session):
        items = list_location_inventory(db.session, location_type=LocationType.BRANCH, location_id=branch.id)
        rows.append({
            "branch_id": branch.id,
            "branch_name": branch.name,
            **totals_json(inventory_totals(items)),
        })
    return jsonify({
        "ok": True,
        "low_stock_threshold": num(LOW_STOCK_THRESHOLD),
        "branches": rows,
    })


# -------------------------
# Compras (entrada na Central)
# -------------------------
@inventory_bp.get("/purchases")
@login_required
@require_roles(Role.ADMIN)
def purchases_list():
    product_id = request.args.get("product_id", type=int)
    rows = list_purchases(db.session, product_id=product_id)
    return jsonify({"ok": True, "purchases": [purchase_json(p) for p in rows]})


@inventory_bp.post("/purchases")
@login_required
@require_roles(Role.ADMIN)
def purchases_create():
    data = request_data()
    purchase = register_purchase(
        db.session,
        product_id=to_int(data.get("product_id"), 0),
        quantity=data.get("quantity"),
        unit_price=data.get("unit_price"),
        supplier=data.get("supplier"),
        purchase_date=_parse_date(data.get("purchase_date")),
        user_id=current_user.id,
    )
    db.session.commit()

    current_app.logger.info(
        "Compra #%s: produto=%s qtd=%s total=%s",
        purchase.id, purchase.product_id, purchase.quantity, purchase.total_price,
    )
    return jsonify({"ok": True, "purchase": purchase_json(purchase)}), 201


# -------------------------
# Consumo (saída na filial)
# -------------------------
@inventory_bp.get("/consumption")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def consumption_list():
    branch_id = scoped_branch_id(requested_branch_id())
    rows = list_consumptions(db.session, branch_id=branch_id)
    return jsonify({"ok": True, "consumptions": [consumption_json(c) for c in rows]})


@inventory_bp.post("/consumption")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def consumption_create():
    data = request_data()
    branch_id = scoped_branch_id(to_int(data.get("branch_id"), 0))
    if not branch_id:
        raise ValueError("Selecione uma filial (branch_id).")

    consumption = register_consumption(
        db.session,
        branch_id=branch_id,
        product_id=to_int(data.get("product_id"), 0),
        quantity=data.get("quantity"),
        consumed_by=data.get("consumed_by"),
        consumed_by_cpf=data.get("consumed_by_cpf"),
        user_id=current_user.id,
    )
    db.session.commit()

    current_app.logger.info(
        "Consumo #%s: filial=%s produto=%s qtd=%s",
        consumption.id, consumption.branch_id, consumption.product_id, consumption.quantity,
    )
    return jsonify({"ok": True, "consumption": consumption_json(consumption)}), 201
