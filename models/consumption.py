from datetime import datetime

from models import db


class Consumption(db.Model):
    __tablename__ = "consumptions"

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)

    quantity = db.Column(db.Numeric(14, 3), nullable=False)

    # Quem retirou o item (não precisa ser usuário do sistema)
    consumed_by = db.Column(db.String(120), nullable=False)
    consumed_by_cpf = db.Column(db.String(11), nullable=False)

    unit_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    registered_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    consumed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
