import os

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev_secret_key_change_me")

    # SQLite local por padrão
    DB_PATH = os.environ.get("DB_PATH", os.path.join(basedir, "suprimentos.db"))
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", f"sqlite:///{DB_PATH}")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"

    # Logs em arquivo rotativo
    LOG_DIR = os.environ.get("LOG_DIR", os.path.join(basedir, "logs"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Cookies de sessão mais seguros (ajuste em produção)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
