# config.py

import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
PROJECT_ROOT = os.path.dirname(basedir)

# Charge un éventuel fichier .env placé à la racine du projet
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

DEFAULT_PORT = "3000"


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Configuration read from the environment when the module is imported.
    create_app() applies per-instance overrides on top (tests use this).
    """
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or \
        "sqlite:///" + os.path.join(PROJECT_ROOT, "storefront.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    HOST = os.environ.get("HOST") or "0.0.0.0"
    LOG_LEVEL = os.environ.get("LOG_LEVEL") or "INFO"

    # Remplit la base avec les données de démonstration au démarrage
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", True)

    PRODUCTS_PAGE_SIZE = 10
    PRODUCTS_MAX_PAGE_SIZE = int(os.environ.get("PRODUCTS_MAX_PAGE_SIZE") or 100)

    # Fichiers statiques servis à la racine "/"
    STATIC_FOLDER = os.path.join(PROJECT_ROOT, "resources")


def resolve_port(env=None):
    """Port to listen on: $PORT, or 3000 when unset or empty."""
    if env is None:
        env = os.environ
    port = env.get("PORT") or DEFAULT_PORT
    try:
        return int(port)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {port!r}") from None
