"""Auto-DevOps Agent Flask Application"""
import os

from flask import Flask

from .controller import ControllerRegistry
from .generator_client import DEFAULT_GENERATOR_URL, GeneratorClient


def _timeout_from_env():
    value = os.environ.get('AUTODEVOPS_GENERATOR_TIMEOUT')
    return float(value) if value else None


def create_app(test_config=None):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['GENERATOR_URL'] = os.environ.get('AUTODEVOPS_GENERATOR_URL', DEFAULT_GENERATOR_URL)
    app.config['GENERATOR_TIMEOUT'] = _timeout_from_env()
    app.config['BASE_PATH'] = os.environ.get('AUTODEVOPS_BASE_PATH', '')
    app.config['MAX_SESSIONS'] = int(os.environ.get(
        'AUTODEVOPS_MAX_SESSIONS', ControllerRegistry.DEFAULT_MAX_CONTROLLERS))

    if test_config:
        app.config.update(test_config)

    def client_factory():
        return GeneratorClient(app.config['GENERATOR_URL'], timeout=app.config['GENERATOR_TIMEOUT'])

    app.extensions['devops_agent'] = ControllerRegistry(
        client_factory, max_controllers=app.config['MAX_SESSIONS'])

    from . import routes
    base_path = app.config['BASE_PATH'].rstrip('/')
    app.register_blueprint(routes.bp, url_prefix=base_path or None)

    return app
