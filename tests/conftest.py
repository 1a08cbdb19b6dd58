import os
import pytest


@pytest.fixture(scope="session", autouse=True)
def _set_env():
    os.environ.setdefault("FLASK_DEBUG", "0")
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("SECRET_KEY", "test-secret")
    os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite:///:memory:")
    yield


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture()
def app(upload_dir):
    from app import create_app
    from extensions import db

    app = create_app({"UPLOAD_FOLDER": str(upload_dir), "TESTING": True})
    app.config.update(WTF_CSRF_ENABLED=False)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def memory_storage():
    from io import BytesIO

    from flask import abort, send_file
    from services.storage import UploadStorage, filename_from_path, generate_filename

    class MemoryUploadStorage(UploadStorage):
        def __init__(self):
            self.files = {}

        def save(self, file_storage):
            filename = generate_filename(file_storage.filename)
            self.files[filename] = file_storage.read()
            return f"/uploads/{filename}"

        def delete(self, path):
            self.files.pop(filename_from_path(path), None)

        def exists(self, path):
            return filename_from_path(path) in self.files

        def send(self, filename):
            if filename not in self.files:
                abort(404)
            return send_file(BytesIO(self.files[filename]), download_name=filename)

    return MemoryUploadStorage()


@pytest.fixture()
def stored_files(upload_dir):
    def _list():
        if not upload_dir.exists():
            return []
        return sorted(p.name for p in upload_dir.iterdir())

    return _list
