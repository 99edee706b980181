from datetime import datetime

from models import db


class Vehicle(db.Model):
    __tablename__ = "vehicles"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)

    plate = db.Column(db.String(10), nullable=False, unique=True)
    model = db.Column(db.String(120), nullable=False)

    # Última leitura registrada (km)
    odometer = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Vehicle {self.plate} branch={self.branch_id}>"
