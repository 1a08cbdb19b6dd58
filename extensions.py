from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from services.storage import UploadStorageExtension

db = SQLAlchemy()
migrate = Migrate()
cors = CORS()
upload_storage = UploadStorageExtension()
