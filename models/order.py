from datetime import datetime
from . import db


class OrderStatus:
    PENDING = "pendente"
    APPROVED = "aprovado"
    REJECTED = "rejeitado"
    # Ainda não há transição que leve a estes dois
    SENT = "enviado"
    RECEIVED = "recebido"

    ALL = {PENDING, APPROVED, REJECTED, SENT, RECEIVED}


class Order(db.Model):
    """
    Pedido de reposição feito por uma filial à Central.
    - pendente -> aprovado | rejeitado (terminais)
    - approved_* só é preenchido ao aprovar
    - justification: obrigatória para item não homologado; ao rejeitar guarda o motivo
    """
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    quantity = db.Column(db.Numeric(14, 3), nullable=False)

    requested_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PENDING, index=True)
    justification = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    approved_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<Order {self.id} branch={self.branch_id} product={self.product_id} status={self.status}>"
