from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.user import Role
from routes.guards import require_roles, requested_branch_id, scoped_branch_id
from routes.serializers import lookup_maps, request_data, shipment_json, to_bool, to_int
from services.catalog import find_product_by_barcode
from services.orders import create_shipment, get_shipment, list_shipments, receive_shipment, shipment_summary

shipments_bp = Blueprint("shipments", __name__, url_prefix="/shipments")


@shipments_bp.get("")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def shipments_list():
    branch_id = scoped_branch_id(requested_branch_id())
    status = (request.args.get("status") or "").strip() or None

    shipments = list_shipments(db.session, branch_id=branch_id, status=status)
    product_map, branch_map = lookup_maps(db)

    return jsonify({
        "ok": True,
        "shipments": [shipment_json(s, product_map, branch_map) for s in shipments],
        "summary": shipment_summary(db.session, branch_id=branch_id),
    })


@shipments_bp.post("")
@login_required
@require_roles(Role.ADMIN)
def shipments_create():
    """
    Envio direto Central -> filial.
    Produto por product_id ou por código de barras (barcode).
    """
    data = request_data()
    product_id = to_int(data.get("product_id"), 0)

    barcode = (data.get("barcode") or "").strip()
    if not product_id and barcode:
        product = find_product_by_barcode(db.session, barcode)
        if not product:
            raise ValueError(f"Código de barras {barcode} não encontrado no catálogo.")
        product_id = product.id

    shipment = create_shipment(
        db.session,
        branch_id=to_int(data.get("branch_id"), 0),
        product_id=product_id,
        quantity=data.get("quantity"),
        sent_by=current_user.id,
        notes=data.get("notes"),
        confirm_not_in_central=to_bool(data.get("confirm_not_in_central")),
    )
    db.session.commit()

    current_app.logger.info(
        "Envio #%s para filial=%s produto=%s qtd=%s por user=%s",
        shipment.id, shipment.branch_id, shipment.product_id, shipment.quantity, current_user.id,
    )
    product_map, branch_map = lookup_maps(db)
    return jsonify({"ok": True, "shipment": shipment_json(shipment, product_map, branch_map)}), 201


@shipments_bp.post("/<int:shipment_id>/receive")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def shipments_receive(shipment_id: int):
    shipment = get_shipment(db.session, shipment_id)

    # Operador só confirma envios destinados à própria filial
    if not current_user.is_admin and shipment.branch_id != current_user.branch_id:
        abort(403, description="Este envio não é destinado à sua filial.")

    shipment = receive_shipment(db.session, shipment_id=shipment_id)
    db.session.commit()

    current_app.logger.info("Envio #%s recebido por user=%s", shipment.id, current_user.id)
    product_map, branch_map = lookup_maps(db)
    return jsonify({"ok": True, "shipment": shipment_json(shipment, product_map, branch_map)})
