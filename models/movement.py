from datetime import datetime
from . import db


class MoveType:
    PURCHASE_IN = "PURCHASE_IN"          # compra recebida na Central
    CONSUMPTION_OUT = "CONSUMPTION_OUT"  # consumo na filial

    ALL = {PURCHASE_IN, CONSUMPTION_OUT}


class StockMovement(db.Model):
    """
    Histórico de movimentações de estoque:
    - origem (from_) e destino (to_) conforme o tipo
    - qty sempre positivo
    - unit_cost opcional (compras)
    """
    __tablename__ = "stock_movements"

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    move_type = db.Column(db.String(20), nullable=False)  # MoveType.*

    # Origem (None em compras)
    from_location_type = db.Column(db.String(20), nullable=True)
    from_location_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=True)

    # Destino (None em consumo)
    to_location_type = db.Column(db.String(20), nullable=True)
    to_location_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=True)

    qty = db.Column(db.Numeric(14, 3), nullable=False)
    unit_cost = db.Column(db.Numeric(14, 4), nullable=True)

    note = db.Column(db.String(255), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index("ix_movement_product_date", "product_id", "created_at"),
    )

    def __repr__(self):
        return f"<StockMovement {self.id} {self.move_type} product={self.product_id} qty={self.qty}>"
