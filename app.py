import logging
import os
from flask import Flask
from config import Config
from extensions import db, migrate, cors, upload_storage
from blueprints.api.routes import bp as api_bp, register_error_handlers
from blueprints.main.routes import bp as main_bp

def create_app(test_config=None, storage=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    # Error details only leave the server in development
    app.config.setdefault("EXPOSE_ERROR_DETAILS", app.config["APP_ENV"] == "development")

    db.init_app(app)
    with app.app_context():
        app.logger.info("Using %s database", db.engine.url.get_backend_name())
    migrate.init_app(app, db)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CLIENT_URL"]}},
        supports_credentials=True,
    )
    upload_storage.init_app(app, storage)

    app.register_blueprint(api_bp)
    app.register_blueprint(main_bp)
    register_error_handlers(app)

    @app.cli.command("init-db")
    def init_db():
        """Create the declarations table if it does not exist."""
        db.create_all()
        app.logger.info("Table 'ai_declarations' created or already exists")

    return app

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    with app.app_context():
        db.create_all()
    debug = os.getenv("FLASK_DEBUG") == "1"
    app.logger.info("API available at http://localhost:%s/api", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=debug)
