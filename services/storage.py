"""Storage for uploaded screenshots.

Views never touch the filesystem directly: they go through the storage
registered on the app (``app.extensions["upload_storage"]``), so tests can
swap in an in-memory implementation.
"""
from __future__ import annotations

import os
import random
import time
from typing import Optional

from flask import Flask, current_app, send_from_directory
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

UPLOAD_URL_PREFIX = "/uploads"
EXTENSION_KEY = "upload_storage"


def generate_filename(original: Optional[str]) -> str:
    _, ext = os.path.splitext(secure_filename(original or ""))
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}"
    return f"screenshot-{unique_suffix}{ext.lower()}"


def filename_from_path(path: str) -> str:
    return os.path.basename(path.rstrip("/"))


class UploadStorage:
    """Store, delete and serve uploads by their public path."""

    def save(self, file_storage: FileStorage) -> str:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def send(self, filename: str):
        raise NotImplementedError


class LocalUploadStorage(UploadStorage):
    def __init__(self, directory: str):
        self.directory = directory

    def _full_path(self, path: str) -> str:
        return os.path.join(self.directory, filename_from_path(path))

    def save(self, file_storage: FileStorage) -> str:
        os.makedirs(self.directory, exist_ok=True)
        filename = generate_filename(file_storage.filename)
        file_storage.save(os.path.join(self.directory, filename))
        return f"{UPLOAD_URL_PREFIX}/{filename}"

    def delete(self, path: str) -> None:
        try:
            os.remove(self._full_path(path))
        except FileNotFoundError:
            pass

    def exists(self, path: str) -> bool:
        return os.path.isfile(self._full_path(path))

    def send(self, filename: str):
        return send_from_directory(self.directory, filename)


class UploadStorageExtension:
    """Binds a storage backend to the app the way Flask extensions do."""

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, storage: Optional[UploadStorage] = None) -> None:
        if storage is None:
            storage = LocalUploadStorage(app.config["UPLOAD_FOLDER"])
        app.extensions[EXTENSION_KEY] = storage

    @staticmethod
    def get() -> UploadStorage:
        return current_app.extensions[EXTENSION_KEY]
