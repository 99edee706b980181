from datetime import datetime

from models import db


class Refueling(db.Model):
    __tablename__ = "refuelings"

    id = db.Column(db.Integer, primary_key=True)

    vehicle_id = db.Column(db.Integer, db.ForeignKey("vehicles.id"), nullable=False, index=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)

    liters = db.Column(db.Numeric(10, 3), nullable=False)
    price_per_liter = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(14, 2), nullable=False)

    odometer = db.Column(db.Integer, nullable=False)

    fueled_by = db.Column(db.String(120), nullable=False)
    registered_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    fueled_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)


class BoatRefueling(db.Model):
    """Abastecimento de diesel de embarcação/motor."""
    __tablename__ = "boat_refuelings"

    id = db.Column(db.Integer, primary_key=True)

    boat_id = db.Column(db.Integer, db.ForeignKey("boats.id"), nullable=False, index=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)

    liters = db.Column(db.Numeric(10, 3), nullable=False)
    price_per_liter = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(14, 2), nullable=False)

    engine_hours = db.Column(db.Numeric(10, 1), nullable=False)
    notes = db.Column(db.String(255), nullable=True)

    fueled_by = db.Column(db.String(120), nullable=False)
    registered_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    fueled_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
