from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from . import db, login_manager


class Role:
    ADMIN = "admin"
    BRANCH_OPERATOR = "branch_operator"

    ALL = {ADMIN, BRANCH_OPERATOR}


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(180), nullable=False, unique=True, index=True)
    full_name = db.Column(db.String(120), nullable=False)
    cpf = db.Column(db.String(14), nullable=True)

    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default=Role.BRANCH_OPERATOR)  # admin / branch_operator

    # Operador de filial: branch_id obrigatório.
    # Admin: branch_id NULL (acesso a todas as filiais).
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    branch = db.relationship("Branch")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email} role={self.role}>"

@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(User, int(user_id))
