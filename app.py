import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, request
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db, login_manager
from services.errors import InvalidStateError, NotFoundError


migrate = Migrate()


def _configure_logging(app: Flask) -> None:
    log_dir = app.config["LOG_DIR"]
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "app.log"),
        maxBytes=2_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ))

    if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
        app.logger.addHandler(file_handler)
    app.logger.setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"ok": False, "error": message}), status

    @app.errorhandler(NotFoundError)
    def _handle_not_found(e):
        db.session.rollback()
        return _error(str(e), 404)

    @app.errorhandler(InvalidStateError)
    def _handle_invalid_state(e):
        db.session.rollback()
        app.logger.warning("Transição inválida em %s %s: %s", request.method, request.path, e)
        return _error(str(e), 409)

    @app.errorhandler(ValueError)
    def _handle_value_error(e):
        db.session.rollback()
        app.logger.warning("Dados inválidos em %s %s: %s", request.method, request.path, e)
        return _error(str(e), 400)

    @app.errorhandler(HTTPException)
    def _handle_http(e):
        return _error(e.description or e.name, e.code or 500)

    @app.errorhandler(500)
    def _handle_500(e):
        db.session.rollback()
        app.logger.exception("Erro 500 não tratado: %s %s", request.method, request.path)
        return _error("Ocorreu um erro interno. O problema foi registrado.", 500)


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # -------------------------
    # Extensões
    # -------------------------
    db.init_app(app)
    migrate.init_app(app, db)

    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"ok": False, "error": "Faça login para continuar."}), 401

    # -------------------------
    # Importar modelos (Alembic)
    # -------------------------
    from models.branch import Branch  # noqa: F401
    from models.user import User  # noqa: F401
    from models.product import Product  # noqa: F401
    from models.authorization import BranchAuthorization  # noqa: F401
    from models.inventory import Inventory  # noqa: F401
    from models.movement import StockMovement  # noqa: F401
    from models.purchase import Purchase  # noqa: F401
    from models.consumption import Consumption  # noqa: F401
    from models.order import Order  # noqa: F401
    from models.shipment import DirectShipment  # noqa: F401
    from models.vehicle import Vehicle  # noqa: F401
    from models.boat import Boat  # noqa: F401
    from models.refueling import Refueling, BoatRefueling  # noqa: F401

    # -------------------------
    # Blueprints
    # -------------------------
    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.catalog import catalog_bp
    from routes.orders import orders_bp
    from routes.shipments import shipments_bp
    from routes.inventory import inventory_bp
    from routes.fleet import fleet_bp

    blueprints = [
        auth_bp,
        main_bp,

        # Cadastros
        catalog_bp,

        # Operação
        orders_bp,
        shipments_bp,
        inventory_bp,
        fleet_bp,
    ]

    for bp in blueprints:
        app.register_blueprint(bp)

    # -------------------------
    # Logging + tratamento global de erros
    # -------------------------
    _configure_logging(app)
    _register_error_handlers(app)

    return app


if __name__ == "__main__":
    app = create_app()
    # Debug controlado por config / variáveis de ambiente
    app.run(debug=app.config.get("DEBUG", False))
