# src/revenue_pacing/web/app.py
"""
Flask application factory with dependency injection.
All route handlers live in blueprints; this module wires configuration.
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from revenue_pacing import __version__
from revenue_pacing.config.settings import get_settings
from revenue_pacing.services.container import ServiceCreationError
from revenue_pacing.services.factory import initialize_services
from revenue_pacing.web.blueprints import get_blueprint_info, initialize_blueprints

logger = logging.getLogger(__name__)


def create_app(environment: Optional[str] = None) -> Flask:
    settings = get_settings(environment)

    try:
        initialize_services(settings)
        logger.info("Service container initialized successfully")
    except ServiceCreationError as e:
        logger.error(f"Failed to initialize services: {e}")
        raise

    app = Flask(__name__)
    app.config.update({
        'SECRET_KEY': settings.web.secret_key,
        'DEBUG': settings.web.debug,
        'TESTING': settings.environment == "test",
        'MAX_CONTENT_LENGTH': settings.web.max_content_length,
        'ENVIRONMENT': settings.environment,
        'PROJECT_ROOT': str(settings.project_root),
        'DATA_PATH': settings.services.data_path,
    })

    initialize_blueprints(app)
    logger.info("Blueprints initialized successfully")

    @app.route('/info')
    def app_info():
        """Application information endpoint."""
        return jsonify({
            'app_name': 'Revenue Pacing Dashboard',
            'version': __version__,
            'environment': settings.environment,
            'debug': settings.web.debug,
            'blueprints': get_blueprint_info(),
            'locations': ['Austin', 'Charlotte'],
        })

    logger.info(f"Flask app created for environment: {settings.environment}")
    return app


def create_wsgi_app() -> Flask:
    """Create WSGI application for production deployment."""
    return create_app('production')


def create_development_app() -> Flask:
    return create_app('development')


def create_testing_app() -> Flask:
    return create_app('testing')


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    app = create_development_app()
    settings = get_settings('development')

    logger.info(f"Starting development server on {settings.web.host}:{settings.web.port}")
    app.run(
        debug=settings.web.debug,
        host=settings.web.host,
        port=settings.web.port,
    )
