"""
Brewline Cafe Loyalty Platform
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_compress import Compress
from flask_cors import CORS

from .extensions import db, migrate
from .config import get_config, validate_config
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

compress = Compress()


def create_app(config_name: str = None, session_loader=None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)
        session_loader: Optional callable returning the signed-in SessionUser
            (or None); defaults to bearer-token verification

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()

    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.json.sort_keys = False

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    compress.init_app(app)
    app.config['COMPRESS_MIMETYPES'] = ['application/json']
    app.config['COMPRESS_MIN_SIZE'] = 500  # Only compress responses > 500 bytes

    # Configure CORS - customer app and cafe dashboard origins
    cors_origins = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')
        if origin.strip()
    ]
    CORS(app, origins=cors_origins, supports_credentials=True, allow_headers=['Content-Type', 'Authorization'])

    # Session auth (pluggable loader)
    from .middleware import init_session_auth, init_request_id_tracking
    init_session_auth(app, session_loader)

    # Request ID tracking for request tracing
    init_request_id_tracking(app)

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'brewline'}

    logger.info(f'Brewline app created ({config_name})')
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    # Coffee profiles
    from .api.profile import profile_bp

    # Loyalty points and vouchers
    from .api.loyalty import loyalty_bp

    app.register_blueprint(profile_bp, url_prefix='/api/profile')
    app.register_blueprint(loyalty_bp, url_prefix='/api/loyalty')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from .utils.errors import ErrorCode, error_response

    @app.errorhandler(400)
    def bad_request(error):
        return error_response('Bad request', ErrorCode.INVALID_REQUEST, 400, log_error=False)

    @app.errorhandler(404)
    def not_found(error):
        return error_response('Not found', ErrorCode.NOT_FOUND, 404, log_error=False)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', ErrorCode.INVALID_REQUEST, 405, log_error=False)

    @app.errorhandler(500)
    def internal_error(error):
        return error_response('Internal server error', details={'error': str(error)})
