import logging

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_restx import Api

from library_api.auth.routes import auth_namespace
from library_api.books import book_namespace
from library_api.borrows import borrow_namespace
from library_api.config import Config, load_config
from library_api.errors import register_error_handlers
from library_api.extensions import Services
from library_api.populate_db import seed_db_command

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def create_app(config: Config = None, clock=None):
    """
    Build the Flask application.

    ``config`` defaults to the configuration named by ``FLASK_ENV`` and raises
    ``ConfigurationError`` straight away when the database URL or the token
    secret is missing. ``clock`` replaces ``datetime.now`` for the borrowing
    rules.
    """
    if config is None:
        config = load_config()
    logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)

    app = Flask(__name__)
    CORS(app, origins="*")
    app.config.from_object(config)

    authorizations = {
        "Bearer Auth": {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "add a JWT with ** Bearer &lt;JWT&gt; to authorize",
        }
    }
    api = Api(
        app,
        title="Library Management API",
        description="Users, books and borrow / return transactions with overdue fines",
        prefix=config.API_PREFIX,
        authorizations=authorizations,
        security="Bearer Auth",
    )
    JWTManager(app)
    register_error_handlers(api)

    library = Services.build(config, clock=clock)
    library.init_app(app)
    library.database.create_all()
    logger.info("Database tables created/updated")

    api.add_namespace(auth_namespace, path="")
    api.add_namespace(book_namespace, path="")
    api.add_namespace(borrow_namespace, path="")

    app.cli.add_command(seed_db_command)

    return app
