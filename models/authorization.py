from datetime import datetime
from . import db


class BranchAuthorization(db.Model):
    """
    Homologação de produto por filial.
    - authorized=True: a filial pode pedir o item sem justificativa
    - sem registro ou authorized=False: o pedido exige justificativa
    """
    __tablename__ = "branch_authorizations"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    authorized = db.Column(db.Boolean, default=True, nullable=False)

    authorized_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    authorized_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("branch_id", "product_id", name="uq_authorization_branch_product"),
    )

    def __repr__(self):
        return f"<BranchAuthorization branch={self.branch_id} product={self.product_id} authorized={self.authorized}>"
