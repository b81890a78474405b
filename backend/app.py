"""Flask application factory for the Restroom Finder data service."""
from flask import Flask
import logging
from pathlib import Path
from .models import db
from .blueprints import auth, restrooms, reviews, reports, rpc
from .cli import init_db_command, seed_restrooms_command, promote_moderator_command
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'SESSION_LIFETIME_HOURS': 24 * 7,
    'NEARBY_RPC_ENABLED': True,
    'MAX_NEARBY_RADIUS_METERS': 100000,
    'RESTROOM_LIST_LIMIT': 500,
}


def create_app(test_config=None):
    """Flask application factory for the data service.

    Creates and configures a Flask application instance with:
    - SQLAlchemy database integration
    - Blueprint registration for table CRUD, auth and remote procedures
    - CLI command registration
    - Logging configuration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    # Setup logging first
    setup_logging()
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    logger.debug(f"Flask app created with instance path: {app.instance_path}")

    app.config.from_mapping(DEFAULT_CONFIG)

    if test_config is None:
        # Load the instance config, if it exists, when not testing
        config_loaded = app.config.from_pyfile('config.py', silent=True)
        if config_loaded:
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using defaults")
        # RESTROOM_NEARBY_RPC_ENABLED=false etc.
        app.config.from_prefixed_env('RESTROOM')
    else:
        # Load the test config if passed in
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    # Ensure the instance folder exists
    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
        logger.debug(f"Created instance directory: {app.instance_path}")
    except OSError:
        logger.debug(f"Instance directory already exists: {app.instance_path}")

    # Only set default database URI if not already set (e.g., by tests)
    if 'SQLALCHEMY_DATABASE_URI' not in app.config:
        db_path = Path(app.instance_path) / 'restrooms.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f'sqlite:///{db_path}'
        logger.info(f"Configured database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    else:
        logger.info(f"Using existing database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    db.init_app(app)
    logger.info("SQLAlchemy database initialized")

    # Register blueprints
    logger.info("Registering API blueprints")
    app.register_blueprint(auth.bp)
    logger.debug("Registered auth blueprint")
    app.register_blueprint(restrooms.bp)
    logger.debug("Registered restrooms blueprint")
    app.register_blueprint(reviews.bp)
    logger.debug("Registered reviews blueprint")
    app.register_blueprint(reports.bp)
    logger.debug("Registered reports blueprint")
    app.register_blueprint(rpc.bp)
    logger.debug("Registered rpc blueprint")
    logger.info("All API blueprints registered successfully")

    # Resolve bearer tokens into g.user for every API request
    auth.init_auth(app)
    logger.info("Authentication system initialized")

    # Register CLI commands
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_restrooms_command)
    app.cli.add_command(promote_moderator_command)
    logger.info("CLI commands registered: init-db, seed-restrooms, promote-moderator")

    logger.info("Flask application initialization completed successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
