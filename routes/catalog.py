from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.user import Role
from routes.guards import require_roles, requested_branch_id, scoped_branch_id
from routes.serializers import branch_json, iso, num, product_json, request_data, to_bool, to_int
from services.catalog import (
    authorized_product_ids,
    create_product,
    list_branches,
    list_authorizations,
    list_products,
    lookup_barcode,
    set_authorization,
    update_product,
)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/catalog")


@catalog_bp.get("/products")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def products_list():
    products = list_products(
        db.session,
        q=request.args.get("q"),
        category=(request.args.get("category") or "").strip() or None,
    )

    # Operador vê a marcação de homologação da própria filial
    branch_id = scoped_branch_id(requested_branch_id())
    if branch_id:
        allowed = authorized_product_ids(db.session, branch_id=branch_id)
        rows = [product_json(p, authorized=p.id in allowed) for p in products]
    else:
        rows = [product_json(p) for p in products]

    return jsonify({"ok": True, "products": rows})


@catalog_bp.post("/products")
@login_required
@require_roles(Role.ADMIN)
def products_create():
    data = request_data()
    product = create_product(
        db.session,
        name=data.get("name"),
        barcode=data.get("barcode"),
        description=data.get("description"),
        category=data.get("category"),
        unit=data.get("unit"),
        requires_barcode=to_bool(data.get("requires_barcode")),
    )
    db.session.commit()

    current_app.logger.info("Produto #%s cadastrado: %s", product.id, product.name)
    return jsonify({"ok": True, "product": product_json(product)}), 201


@catalog_bp.route("/products/<int:product_id>", methods=["PUT", "POST"])
@login_required
@require_roles(Role.ADMIN)
def products_update(product_id: int):
    data = request_data()
    product = update_product(
        db.session,
        product_id=product_id,
        name=data.get("name"),
        barcode=data.get("barcode"),
        description=data.get("description"),
        category=data.get("category"),
        unit=data.get("unit"),
        requires_barcode=to_bool(data["requires_barcode"]) if "requires_barcode" in data else None,
    )
    db.session.commit()

    current_app.logger.info("Produto #%s atualizado por user=%s", product.id, current_user.id)
    return jsonify({"ok": True, "product": product_json(product)})


@catalog_bp.get("/barcode/<barcode>")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def barcode_lookup(barcode: str):
    result = lookup_barcode(db.session, barcode)
    return jsonify({
        "ok": True,
        "found": result["found"],
        "product": product_json(result["product"]) if result["product"] else None,
        "in_central": result["in_central"],
        "central_stock": num(result["central_stock"]),
    })


@catalog_bp.get("/authorizations")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def authorizations_list():
    branch_id = scoped_branch_id(requested_branch_id())
    rows = [
        {
            "branch_id": a.branch_id,
            "product_id": a.product_id,
            "authorized": a.authorized,
            "authorized_by": a.authorized_by_user_id,
            "authorized_at": iso(a.authorized_at),
        }
        for a in list_authorizations(db.session, branch_id=branch_id)
    ]
    return jsonify({"ok": True, "authorizations": rows})


@catalog_bp.post("/authorizations")
@login_required
@require_roles(Role.ADMIN)
def authorizations_set():
    data = request_data()
    auth = set_authorization(
        db.session,
        branch_id=to_int(data.get("branch_id"), 0),
        product_id=to_int(data.get("product_id"), 0),
        authorized=to_bool(data.get("authorized", True)),
        user_id=current_user.id,
    )
    db.session.commit()

    current_app.logger.info(
        "Homologação filial=%s produto=%s -> %s (user=%s)",
        auth.branch_id, auth.product_id, auth.authorized, current_user.id,
    )
    return jsonify({
        "ok": True,
        "authorization": {
            "branch_id": auth.branch_id,
            "product_id": auth.product_id,
            "authorized": auth.authorized,
            "authorized_at": iso(auth.authorized_at),
        },
    })


@catalog_bp.get("/branches")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def branches_list():
    include_central = (request.args.get("central") or "").strip() == "1"
    branches = list_branches(db.session, include_central=include_central)
    return jsonify({"ok": True, "branches": [branch_json(b) for b in branches]})
