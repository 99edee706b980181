from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.user import Role
from routes.guards import require_roles, requested_branch_id, scoped_branch_id
from routes.serializers import lookup_maps, order_json, request_data, to_int
from services.catalog import is_product_authorized
from services.orders import approve_order, create_order, list_orders, order_summary, reject_order

orders_bp = Blueprint("orders", __name__, url_prefix="/orders")


@orders_bp.get("")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def orders_list():
    """Admin vê os pedidos de todas as filiais; operador só os da própria."""
    branch_id = scoped_branch_id(requested_branch_id())
    status = (request.args.get("status") or "").strip() or None

    orders = list_orders(db.session, branch_id=branch_id, status=status)
    product_map, branch_map = lookup_maps(db)

    return jsonify({
        "ok": True,
        "orders": [order_json(o, product_map, branch_map) for o in orders],
        "summary": order_summary(db.session, branch_id=branch_id),
    })


@orders_bp.get("/summary")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def orders_summary():
    branch_id = scoped_branch_id(requested_branch_id())
    return jsonify({"ok": True, "summary": order_summary(db.session, branch_id=branch_id)})


@orders_bp.post("")
@login_required
@require_roles(Role.BRANCH_OPERATOR)
def orders_create():
    data = request_data()
    branch_id = current_user.branch_id
    product_id = to_int(data.get("product_id"), 0)

    order = create_order(
        db.session,
        branch_id=branch_id,
        product_id=product_id,
        quantity=data.get("quantity"),
        requested_by=current_user.id,
        justification=data.get("justification"),
    )
    db.session.commit()

    warnings = []
    if not is_product_authorized(db.session, branch_id=branch_id, product_id=product_id):
        warnings.append("Atenção: Este item não está homologado para sua filial.")

    current_app.logger.info(
        "Pedido #%s criado: filial=%s produto=%s qtd=%s por user=%s",
        order.id, branch_id, product_id, order.quantity, current_user.id,
    )
    product_map, branch_map = lookup_maps(db)
    return jsonify({"ok": True, "order": order_json(order, product_map, branch_map), "warnings": warnings}), 201


@orders_bp.post("/<int:order_id>/approve")
@login_required
@require_roles(Role.ADMIN)
def orders_approve(order_id: int):
    order = approve_order(db.session, order_id=order_id, approved_by=current_user.id)
    db.session.commit()

    current_app.logger.info("Pedido #%s aprovado por user=%s", order.id, current_user.id)
    product_map, branch_map = lookup_maps(db)
    return jsonify({"ok": True, "order": order_json(order, product_map, branch_map)})


@orders_bp.post("/<int:order_id>/reject")
@login_required
@require_roles(Role.ADMIN)
def orders_reject(order_id: int):
    data = request_data()
    order = reject_order(db.session, order_id=order_id, reason=data.get("reason"))
    db.session.commit()

    current_app.logger.info("Pedido #%s rejeitado por user=%s: %s", order.id, current_user.id, order.justification)
    product_map, branch_map = lookup_maps(db)
    return jsonify({"ok": True, "order": order_json(order, product_map, branch_map)})
