from datetime import datetime

from . import db


class ProductCategory:
    FOOD = "alimento"
    MEDICINE = "medicamento"
    LINEN = "enxoval"
    OTHER = "outro"

    ALL = {FOOD, MEDICINE, LINEN, OTHER}


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)

    # Código de barras (EAN). Único quando informado.
    barcode = db.Column(db.String(60), nullable=True, unique=True, index=True)

    name = db.Column(db.String(160), nullable=False)
    description = db.Column(db.String(255), nullable=True)

    category = db.Column(db.String(20), nullable=False, default=ProductCategory.OTHER)
    unit = db.Column(db.String(20), nullable=False, default="un")

    # Itens rastreados exigem código de barras no cadastro
    requires_barcode = db.Column(db.Boolean, default=False, nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Product {self.id} {self.name} barcode={self.barcode}>"
