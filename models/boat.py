from datetime import datetime

from models import db


class Boat(db.Model):
    """Embarcação, motor ou gerador a diesel."""
    __tablename__ = "boats"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    registration = db.Column(db.String(40), nullable=False, unique=True)
    model = db.Column(db.String(120), nullable=True)

    # Horímetro (horas de motor)
    engine_hours = db.Column(db.Numeric(10, 1), nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Boat {self.registration} branch={self.branch_id}>"
