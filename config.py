import os
from dotenv import load_dotenv
load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DB_ENV_VARS = ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_PORT")


def _database_uri():
    uri = os.getenv("SQLALCHEMY_DATABASE_URI")
    if uri:
        return uri
    if not any(os.getenv(name) for name in DB_ENV_VARS):
        return "sqlite:///app.db"
    host = os.getenv("DB_HOST", "localhost")
    user = os.getenv("DB_USER", "root")
    password = os.getenv("DB_PASSWORD", "")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME", "ai_guidebook_db")
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    APP_ENV = os.getenv("APP_ENV", "production")
    PORT = int(os.getenv("PORT", 5000))
    CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # sqlite pools do not take a size; server databases get a bounded pool
    SQLALCHEMY_ENGINE_OPTIONS = (
        {} if SQLALCHEMY_DATABASE_URI.startswith("sqlite")
        else {"pool_size": 10, "max_overflow": 0, "pool_pre_ping": True}
    )

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_SCREENSHOT_SIZE = 5 * 1024 * 1024
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))  # 16 MB default upload cap
