from datetime import datetime
from . import db


class LocationType:
    WAREHOUSE = "WAREHOUSE"
    BRANCH = "BRANCH"
    ALL = {WAREHOUSE, BRANCH}


class Inventory(db.Model):
    """
    Estoque por produto e local.
    location_type:
      - WAREHOUSE: a Central (Branch com is_central=True)
      - BRANCH: uma filial
    location_id:
      - sempre é Branch.id (Central ou filial)
    """
    __tablename__ = "inventories"

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    location_type = db.Column(db.String(20), nullable=False)  # WAREHOUSE / BRANCH
    location_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False)

    qty = db.Column(db.Numeric(14, 3), nullable=False, default=0)  # unidade/peso/litros
    unit_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "location_type", "location_id", name="uq_inventory_product_location"),
        db.Index("ix_inventory_location", "location_type", "location_id"),
    )

    def __repr__(self):
        return f"<Inventory product={self.product_id} {self.location_type}:{self.location_id} qty={self.qty}>"
