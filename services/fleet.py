from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.boat import Boat
from models.refueling import BoatRefueling, Refueling
from models.vehicle import Vehicle
from services.catalog import get_active_branch
from services.errors import NotFoundError
from services.stock import clean_str, parse_price, to_qty


def _parse_liters(v) -> Decimal:
    liters = to_qty(v)
    if liters <= 0:
        raise ValueError("Litros deve ser maior que zero.")
    return liters


def _parse_reading(v, label: str) -> Decimal:
    if not clean_str(v):
        raise ValueError(f"Informe o {label}.")
    return to_qty(v)


# -------------------------
# Veículos e embarcações
# -------------------------
def get_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter_by(id=vehicle_id, is_active=True).first()
    if not vehicle:
        raise NotFoundError("Veículo não encontrado.")
    return vehicle


def get_boat(db: Session, boat_id: int) -> Boat:
    boat = db.query(Boat).filter_by(id=boat_id, is_active=True).first()
    if not boat:
        raise NotFoundError("Embarcação não encontrada.")
    return boat


def list_vehicles(db: Session, *, branch_id: Optional[int] = None) -> list[Vehicle]:
    q = db.query(Vehicle).filter(Vehicle.is_active == True)
    if branch_id:
        q = q.filter(Vehicle.branch_id == branch_id)
    return q.order_by(Vehicle.plate.asc()).all()


def list_boats(db: Session, *, branch_id: Optional[int] = None) -> list[Boat]:
    q = db.query(Boat).filter(Boat.is_active == True)
    if branch_id:
        q = q.filter(Boat.branch_id == branch_id)
    return q.order_by(Boat.name.asc()).all()


def create_vehicle(db: Session, *, branch_id: int, plate: str, model: str, odometer=0) -> Vehicle:
    branch = get_active_branch(db, branch_id)
    plate = clean_str(plate).upper().replace("-", "")
    model = clean_str(model)
    if not plate or not model:
        raise ValueError("Placa e modelo são obrigatórios.")
    if db.query(Vehicle.id).filter(Vehicle.plate == plate).first() is not None:
        raise ValueError(f"Já existe veículo com a placa {plate}.")

    vehicle = Vehicle(branch_id=branch.id, plate=plate, model=model, odometer=int(to_qty(odometer)))
    db.add(vehicle)
    db.flush()
    return vehicle


def create_boat(
    db: Session,
    *,
    branch_id: int,
    name: str,
    registration: str,
    model: Optional[str] = None,
    engine_hours=0
) -> Boat:
    branch = get_active_branch(db, branch_id)
    name = clean_str(name)
    registration = clean_str(registration).upper()
    if not name or not registration:
        raise ValueError("Nome e registro são obrigatórios.")
    if db.query(Boat.id).filter(Boat.registration == registration).first() is not None:
        raise ValueError(f"Já existe embarcação com o registro {registration}.")

    boat = Boat(
        branch_id=branch.id,
        name=name,
        registration=registration,
        model=clean_str(model) or None,
        engine_hours=to_qty(engine_hours).quantize(Decimal("0.1")),
    )
    db.add(boat)
    db.flush()
    return boat


# -------------------------
# Abastecimentos
# -------------------------
def register_refueling(
    db: Session,
    *,
    vehicle_id: int,
    liters,
    price_per_liter,
    odometer,
    fueled_by: str,
    user_id: Optional[int] = None
) -> Refueling:
    """
    Abastecimento de veículo. A filial é a do veículo.
    O hodômetro não pode voltar; a leitura nova passa a ser a do veículo.
    """
    vehicle = get_vehicle(db, vehicle_id)

    qty = _parse_liters(liters)
    price = parse_price(price_per_liter, "Preço por litro")
    reading = int(_parse_reading(odometer, "hodômetro"))
    if reading < (vehicle.odometer or 0):
        raise ValueError(f"Hodômetro menor que a última leitura ({vehicle.odometer} km).")

    fueled_by = clean_str(fueled_by)
    if not fueled_by:
        raise ValueError("Informe quem abasteceu.")

    refueling = Refueling(
        vehicle_id=vehicle.id,
        branch_id=vehicle.branch_id,
        liters=qty,
        price_per_liter=price,
        total_price=(qty * price).quantize(Decimal("0.01")),
        odometer=reading,
        fueled_by=fueled_by,
        registered_by_user_id=user_id,
        fueled_at=datetime.utcnow(),
    )
    vehicle.odometer = reading
    db.add(refueling)
    db.flush()
    return refueling


def register_boat_refueling(
    db: Session,
    *,
    boat_id: int,
    liters,
    price_per_liter,
    engine_hours,
    fueled_by: str,
    notes: Optional[str] = None,
    user_id: Optional[int] = None
) -> BoatRefueling:
    """Diesel para embarcação/motor. Horímetro segue a mesma regra do hodômetro."""
    boat = get_boat(db, boat_id)

    qty = _parse_liters(liters)
    price = parse_price(price_per_liter, "Preço por litro")
    hours = _parse_reading(engine_hours, "horímetro").quantize(Decimal("0.1"))
    if hours < to_qty(boat.engine_hours):
        raise ValueError(f"Horímetro menor que a última leitura ({boat.engine_hours} h).")

    fueled_by = clean_str(fueled_by)
    if not fueled_by:
        raise ValueError("Informe quem abasteceu.")

    refueling = BoatRefueling(
        boat_id=boat.id,
        branch_id=boat.branch_id,
        liters=qty,
        price_per_liter=price,
        total_price=(qty * price).quantize(Decimal("0.01")),
        engine_hours=hours,
        notes=clean_str(notes) or None,
        fueled_by=fueled_by,
        registered_by_user_id=user_id,
        fueled_at=datetime.utcnow(),
    )
    boat.engine_hours = hours
    db.add(refueling)
    db.flush()
    return refueling


def list_refuelings(db: Session, *, branch_id: Optional[int] = None) -> list[Refueling]:
    q = db.query(Refueling)
    if branch_id:
        q = q.filter(Refueling.branch_id == branch_id)
    return q.order_by(Refueling.fueled_at.desc(), Refueling.id.desc()).limit(500).all()


def list_boat_refuelings(db: Session, *, branch_id: Optional[int] = None) -> list[BoatRefueling]:
    q = db.query(BoatRefueling)
    if branch_id:
        q = q.filter(BoatRefueling.branch_id == branch_id)
    return q.order_by(BoatRefueling.fueled_at.desc(), BoatRefueling.id.desc()).limit(500).all()


def _totals(db: Session, model, branch_id: Optional[int]) -> dict:
    q = db.query(
        func.count(model.id),
        func.coalesce(func.sum(model.liters), 0),
        func.coalesce(func.sum(model.total_price), 0),
    )
    if branch_id:
        q = q.filter(model.branch_id == branch_id)
    count, liters, value = q.one()
    return {
        "count": int(count),
        "liters": to_qty(liters),
        "value": to_qty(value).quantize(Decimal("0.01")),
    }


def refueling_summary(db: Session, *, branch_id: Optional[int] = None) -> dict:
    """Totais de abastecimento (veículos e embarcações separados). branch_id=None => todas."""
    vehicles = _totals(db, Refueling, branch_id)
    boats = _totals(db, BoatRefueling, branch_id)
    return {
        "vehicles": vehicles,
        "boats": boats,
        "total_count": vehicles["count"] + boats["count"],
        "total_liters": vehicles["liters"] + boats["liters"],
        "total_value": vehicles["value"] + boats["value"],
        "vehicle_count": len(list_vehicles(db, branch_id=branch_id)),
        "boat_count": len(list_boats(db, branch_id=branch_id)),
    }
