from flask import current_app, jsonify, session
from flask_login import current_user, login_required, login_user, logout_user

from models import db
from models.user import User
from routes import auth_bp
from routes.serializers import request_data


def _user_json(user: User):
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
        "branch_id": user.branch_id,
    }


@auth_bp.post("/login")
def login_post():
    data = request_data()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = db.session.query(User).filter(User.email == email, User.is_active == True).first()
    if not user or not user.check_password(password):
        current_app.logger.warning("Login recusado para %s", email or "<vazio>")
        return jsonify({"ok": False, "error": "Credenciais inválidas"}), 401

    # Limpar sessão anterior
    session.clear()
    login_user(user)

    return jsonify({"ok": True, "user": _user_json(user)})


@auth_bp.get("/logout")
@login_required
def logout():
    logout_user()
    session.clear()
    return jsonify({"ok": True})


@auth_bp.get("/me")
@login_required
def me():
    return jsonify({"ok": True, "user": _user_json(current_user)})
