from decimal import Decimal
from types import SimpleNamespace

import pytest

from models import db
from services.errors import NotFoundError
from services.fleet import (
    create_boat,
    create_vehicle,
    list_refuelings,
    refueling_summary,
    register_boat_refueling,
    register_refueling,
)
from tests.conftest import login


@pytest.fixture()
def fleet(data):
    """Caminhonete na Filial Norte, voadeira na Filial Sul."""
    truck = create_vehicle(db.session, branch_id=data.b1, plate="abc-1d23", model="Toyota Hilux", odometer=45000)
    boat = create_boat(
        db.session, branch_id=data.b2, name="Voadeira Sul", registration="cpam-0042",
        model="Yamaha 40HP", engine_hours="1200.5",
    )
    db.session.commit()
    return SimpleNamespace(truck=truck.id, boat=boat.id)


# -------------------------
# Serviço
# -------------------------
def test_vehicle_and_boat_registration_rules(data, fleet):
    with pytest.raises(ValueError, match="placa"):
        create_vehicle(db.session, branch_id=data.b2, plate="ABC1D23", model="Outro")
    with pytest.raises(ValueError, match="obrigatórios"):
        create_vehicle(db.session, branch_id=data.b2, plate="", model="Strada")
    with pytest.raises(ValueError, match="registro"):
        create_boat(db.session, branch_id=data.b1, name="Outra", registration="CPAM-0042")
    with pytest.raises(NotFoundError):
        create_vehicle(db.session, branch_id=999, plate="QQQ0000", model="Gol")


def test_refueling_updates_odometer_and_totals(data, fleet):
    refueling = register_refueling(
        db.session,
        vehicle_id=fleet.truck,
        liters="40,5",
        price_per_liter="6.20",
        odometer=45320,
        fueled_by="João Pereira",
        user_id=data.op1,
    )

    assert refueling.branch_id == data.b1
    assert refueling.total_price == Decimal("251.10")
    assert refueling.vehicle_id == fleet.truck
    assert list_refuelings(db.session, branch_id=data.b1)[0].id == refueling.id
    assert list_refuelings(db.session, branch_id=data.b2) == []

    with pytest.raises(ValueError, match="Hodômetro"):
        register_refueling(
            db.session, vehicle_id=fleet.truck, liters=10, price_per_liter="6.20",
            odometer=45000, fueled_by="João Pereira",
        )


@pytest.mark.parametrize("field, value, message", [
    ("liters", "0", "Litros"),
    ("price_per_liter", "", "preço por litro"),
    ("odometer", None, "hodômetro"),
    ("fueled_by", "  ", "quem abasteceu"),
])
def test_refueling_validation(data, fleet, field, value, message):
    payload = dict(liters="30", price_per_liter="6.00", odometer=45100, fueled_by="Ana")
    payload[field] = value
    with pytest.raises(ValueError, match=message):
        register_refueling(db.session, vehicle_id=fleet.truck, **payload)


def test_boat_refueling_and_summary_by_branch(data, fleet):
    register_refueling(
        db.session, vehicle_id=fleet.truck, liters=50, price_per_liter="6.00", odometer=45500, fueled_by="João"
    )
    diesel = register_boat_refueling(
        db.session,
        boat_id=fleet.boat,
        liters=100,
        price_per_liter="5.80",
        engine_hours="1210",
        fueled_by="Pedro",
        notes="Viagem à comunidade",
    )
    assert diesel.branch_id == data.b2
    assert diesel.total_price == Decimal("580.00")

    with pytest.raises(ValueError, match="Horímetro"):
        register_boat_refueling(
            db.session, boat_id=fleet.boat, liters=10, price_per_liter="5.80", engine_hours="1000", fueled_by="Pedro"
        )

    everything = refueling_summary(db.session)
    assert everything["vehicles"] == {"count": 1, "liters": Decimal("50"), "value": Decimal("300.00")}
    assert everything["boats"]["count"] == 1
    assert everything["total_count"] == 2
    assert everything["total_liters"] == Decimal("150")
    assert everything["total_value"] == Decimal("880.00")
    assert everything["vehicle_count"] == 1
    assert everything["boat_count"] == 1

    norte = refueling_summary(db.session, branch_id=data.b1)
    assert norte["total_count"] == 1
    assert norte["boats"]["count"] == 0
    assert norte["boat_count"] == 0


# -------------------------
# API
# -------------------------
def test_operator_refuels_own_vehicle_only(client, data, fleet):
    login(client, "sul@test.local")
    resp = client.post("/fleet/refuelings", json={
        "vehicle_id": fleet.truck, "liters": 30, "price_per_liter": "6.00", "odometer": 45100, "fueled_by": "Ana",
    })
    assert resp.status_code == 403
    client.get("/auth/logout")

    login(client, "norte@test.local")
    resp = client.post("/fleet/refuelings", json={
        "vehicle_id": fleet.truck, "liters": 30, "price_per_liter": "6.00", "odometer": 45100, "fueled_by": "Ana",
    })
    assert resp.status_code == 201
    assert resp.get_json()["refueling"]["total_price"] == 180.0

    vehicles = client.get("/fleet/vehicles").get_json()["vehicles"]
    assert [(v["plate"], v["odometer"]) for v in vehicles] == [("ABC1D23", 45100)]

    resp = client.post("/fleet/refuelings", json={"vehicle_id": 999, "liters": 1})
    assert resp.status_code == 404


def test_refueling_listing_scoped_by_branch(client, data, fleet):
    login(client, "sul@test.local")
    resp = client.post("/fleet/boat-refuelings", json={
        "boat_id": fleet.boat, "liters": "80", "price_per_liter": "5.50", "engine_hours": "1215", "fueled_by": "Pedro",
    })
    assert resp.status_code == 201
    assert resp.get_json()["refueling"]["engine_hours"] == 1215.0

    # operador não vê outra filial mesmo pedindo
    body = client.get(f"/fleet/refuelings?branch_id={data.b1}").get_json()
    assert len(body["boat_refuelings"]) == 1
    assert body["summary"]["boats"] == {"count": 1, "liters": 80.0, "value": 440.0}
    client.get("/auth/logout")

    login(client, "norte@test.local")
    body = client.get("/fleet/refuelings").get_json()
    assert body["refuelings"] == []
    assert body["boat_refuelings"] == []
    assert body["summary"]["total_count"] == 0
    client.get("/auth/logout")

    login(client, "admin@test.local")
    summary = client.get("/fleet/refuelings/summary").get_json()["summary"]
    assert summary["total_count"] == 1
    assert summary["total_liters"] == 80.0
    assert summary["vehicle_count"] == 1
    assert summary["boat_count"] == 1


def test_only_admin_registers_fleet(client, data):
    login(client, "norte@test.local")
    assert client.post("/fleet/vehicles", json={"branch_id": data.b1, "plate": "AAA0000", "model": "Gol"}).status_code == 403
    client.get("/auth/logout")

    login(client, "admin@test.local")
    resp = client.post("/fleet/vehicles", json={"branch_id": data.b1, "plate": "aaa-0000", "model": "Gol"})
    assert resp.status_code == 201
    assert resp.get_json()["vehicle"]["plate"] == "AAA0000"

    resp = client.post("/fleet/boats", json={"branch_id": data.b2, "name": "Gerador", "registration": "GER-9"})
    assert resp.status_code == 201
    assert [b["name"] for b in client.get("/fleet/boats").get_json()["boats"]] == ["Gerador"]
