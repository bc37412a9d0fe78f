import logging

import click
from flask import Flask
from flask.logging import default_handler

from .config import Config
from .middleware import init_request_logging
from .models import db
from .seed import seed_data
from .services import create_services


def _configure_logging(app):
    default_handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
    app.logger.setLevel(str(app.config["LOG_LEVEL"]).upper())


def create_app(config=None):
    overrides = dict(config or {})
    static_folder = overrides.get("STATIC_FOLDER", Config.STATIC_FOLDER)

    # les fichiers de resources/ sont servis directement sous "/"
    app = Flask(__name__, template_folder="templates", static_folder=static_folder, static_url_path="")
    app.config.from_object(Config)
    app.config.update(overrides)

    _configure_logging(app)

    db.init_app(app)
    app.extensions["services"] = create_services(app.config)

    init_request_logging(app)

    with app.app_context():
        db.create_all()
        if app.config["SEED_ON_STARTUP"]:
            # une erreur ici est fatale : l'application ne démarre pas
            seed_data()

    from .routes.home_routes import home_bp
    from .routes.product_routes import products_bp
    app.register_blueprint(home_bp)
    app.register_blueprint(products_bp)

    @app.cli.command("seed")
    def seed_command():
        """Populate the database with demo data."""
        seed_data()
        click.echo("Seeding complete.")

    return app
