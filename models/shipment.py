from datetime import datetime
from . import db


class ShipmentStatus:
    IN_TRANSIT = "em_transito"
    RECEIVED = "recebido"

    ALL = {IN_TRANSIT, RECEIVED}


class DirectShipment(db.Model):
    __tablename__ = "direct_shipments"

    id = db.Column(db.Integer, primary_key=True)

    # Filial de destino (origem é sempre a Central)
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    quantity = db.Column(db.Numeric(14, 3), nullable=False)

    sent_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    # Estado do envio
    # - em_transito: saiu da Central (não baixa estoque)
    # - recebido: filial confirmou a chegada
    status = db.Column(db.String(20), nullable=False, default=ShipmentStatus.IN_TRANSIT, index=True)

    notes = db.Column(db.String(255), nullable=True)

    sent_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    received_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<DirectShipment {self.id} branch={self.branch_id} product={self.product_id} status={self.status}>"
