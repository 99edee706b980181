from datetime import datetime
from . import db

class Branch(db.Model):
    __tablename__ = "branches"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(120), nullable=False)
    code = db.Column(db.String(20), nullable=False, unique=True)
    address = db.Column(db.String(255), nullable=True)

    is_central = db.Column(db.Boolean, default=False, nullable=False)  # Central = True
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Branch {self.id} {self.code} central={self.is_central}>"
