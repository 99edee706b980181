from flask import jsonify
from flask_login import current_user, login_required

from models import db
from models.inventory import LocationType
from models.order import OrderStatus
from models.shipment import ShipmentStatus
from models.user import Role
from routes import main_bp
from routes.guards import require_roles
from services.catalog import authorized_product_ids, get_central_branch, list_branches
from services.orders import order_summary, shipment_summary
from services.stock import list_location_inventory


def _dashboard_payload(branch_id: int | None):
    """Contadores do painel (Central vê tudo; filial só a própria)."""
    orders = order_summary(db.session, branch_id=branch_id)
    shipments = shipment_summary(db.session, branch_id=branch_id)

    if branch_id is None:
        central = get_central_branch(db.session)
        central_items = list_location_inventory(
            db.session, location_type=LocationType.WAREHOUSE, location_id=central.id
        )
        return {
            "scope": "central",
            "shipments_total": shipments["total"],
            "shipments_in_transit": shipments[ShipmentStatus.IN_TRANSIT],
            "orders_pending": orders[OrderStatus.PENDING],
            "orders_approved": orders[OrderStatus.APPROVED],
            "active_branches": len(list_branches(db.session)),
            "central_items": len(central_items),
        }

    return {
        "scope": "branch",
        "branch_id": branch_id,
        "orders_pending": orders[OrderStatus.PENDING],
        "orders_approved": orders[OrderStatus.APPROVED],
        "orders_rejected": orders[OrderStatus.REJECTED],
        "shipments_in_transit": shipments[ShipmentStatus.IN_TRANSIT],
        "authorized_products": len(authorized_product_ids(db.session, branch_id=branch_id)),
    }


@main_bp.get("/dashboard")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def dashboard():
    branch_id = None if current_user.is_admin else current_user.branch_id
    return jsonify({"ok": True, "dashboard": _dashboard_payload(branch_id)})
