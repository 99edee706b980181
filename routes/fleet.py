from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from models import db
from models.user import Role
from routes.guards import require_roles, requested_branch_id, scoped_branch_id
from routes.serializers import boat_json, num, refueling_json, request_data, to_int, vehicle_json
from services.fleet import (
    create_boat,
    create_vehicle,
    get_boat,
    get_vehicle,
    list_boat_refuelings,
    list_boats,
    list_refuelings,
    list_vehicles,
    refueling_summary,
    register_boat_refueling,
    register_refueling,
)

fleet_bp = Blueprint("fleet", __name__, url_prefix="/fleet")


def _check_branch(branch_id: int):
    # Operador só abastece o que é da própria filial
    if current_user.role == Role.BRANCH_OPERATOR and branch_id != current_user.branch_id:
        abort(403, description="Este item não pertence à sua filial.")


def _summary_json(s: dict) -> dict:
    def part(p):
        return {"count": p["count"], "liters": num(p["liters"]), "value": num(p["value"])}

    return {
        "vehicles": part(s["vehicles"]),
        "boats": part(s["boats"]),
        "total_count": s["total_count"],
        "total_liters": num(s["total_liters"]),
        "total_value": num(s["total_value"]),
        "vehicle_count": s["vehicle_count"],
        "boat_count": s["boat_count"],
    }


# -------------------------
# Frota
# -------------------------
@fleet_bp.get("/vehicles")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def vehicles_list():
    branch_id = scoped_branch_id(requested_branch_id())
    return jsonify({"ok": True, "vehicles": [vehicle_json(v) for v in list_vehicles(db.session, branch_id=branch_id)]})


@fleet_bp.post("/vehicles")
@login_required
@require_roles(Role.ADMIN)
def vehicles_create():
    data = request_data()
    vehicle = create_vehicle(
        db.session,
        branch_id=to_int(data.get("branch_id"), 0),
        plate=data.get("plate"),
        model=data.get("model"),
        odometer=data.get("odometer", 0),
    )
    db.session.commit()

    current_app.logger.info("Veículo #%s cadastrado: %s filial=%s", vehicle.id, vehicle.plate, vehicle.branch_id)
    return jsonify({"ok": True, "vehicle": vehicle_json(vehicle)}), 201


@fleet_bp.get("/boats")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def boats_list():
    branch_id = scoped_branch_id(requested_branch_id())
    return jsonify({"ok": True, "boats": [boat_json(b) for b in list_boats(db.session, branch_id=branch_id)]})


@fleet_bp.post("/boats")
@login_required
@require_roles(Role.ADMIN)
def boats_create():
    data = request_data()
    boat = create_boat(
        db.session,
        branch_id=to_int(data.get("branch_id"), 0),
        name=data.get("name"),
        registration=data.get("registration"),
        model=data.get("model"),
        engine_hours=data.get("engine_hours", 0),
    )
    db.session.commit()

    current_app.logger.info("Embarcação #%s cadastrada: %s filial=%s", boat.id, boat.registration, boat.branch_id)
    return jsonify({"ok": True, "boat": boat_json(boat)}), 201


# -------------------------
# Abastecimentos
# -------------------------
@fleet_bp.get("/refuelings")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def refuelings_list():
    branch_id = scoped_branch_id(requested_branch_id())
    return jsonify({
        "ok": True,
        "refuelings": [refueling_json(r) for r in list_refuelings(db.session, branch_id=branch_id)],
        "boat_refuelings": [refueling_json(r) for r in list_boat_refuelings(db.session, branch_id=branch_id)],
        "summary": _summary_json(refueling_summary(db.session, branch_id=branch_id)),
    })


@fleet_bp.get("/refuelings/summary")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def refuelings_summary():
    branch_id = scoped_branch_id(requested_branch_id())
    return jsonify({"ok": True, "summary": _summary_json(refueling_summary(db.session, branch_id=branch_id))})


@fleet_bp.post("/refuelings")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def refuelings_create():
    data = request_data()
    vehicle = get_vehicle(db.session, to_int(data.get("vehicle_id"), 0))
    _check_branch(vehicle.branch_id)

    refueling = register_refueling(
        db.session,
        vehicle_id=vehicle.id,
        liters=data.get("liters"),
        price_per_liter=data.get("price_per_liter"),
        odometer=data.get("odometer"),
        fueled_by=data.get("fueled_by"),
        user_id=current_user.id,
    )
    db.session.commit()

    current_app.logger.info(
        "Abastecimento #%s: veículo=%s litros=%s total=%s",
        refueling.id, refueling.vehicle_id, refueling.liters, refueling.total_price,
    )
    return jsonify({"ok": True, "refueling": refueling_json(refueling)}), 201


@fleet_bp.post("/boat-refuelings")
@login_required
@require_roles(Role.ADMIN, Role.BRANCH_OPERATOR)
def boat_refuelings_create():
    data = request_data()
    boat = get_boat(db.session, to_int(data.get("boat_id"), 0))
    _check_branch(boat.branch_id)

    refueling = register_boat_refueling(
        db.session,
        boat_id=boat.id,
        liters=data.get("liters"),
        price_per_liter=data.get("price_per_liter"),
        engine_hours=data.get("engine_hours"),
        fueled_by=data.get("fueled_by"),
        notes=data.get("notes"),
        user_id=current_user.id,
    )
    db.session.commit()

    current_app.logger.info(
        "Abastecimento diesel #%s: embarcação=%s litros=%s total=%s",
        refueling.id, refueling.boat_id, refueling.liters, refueling.total_price,
    )
    return jsonify({"ok": True, "refueling": refueling_json(refueling)}), 201
