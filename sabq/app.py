"""
Navigation service: serves the filtered Sabq dashboard sidebar.

Logging: All logs go to stderr (no log file). Set LOG_LEVEL=DEBUG to see
per-request resolution details (policy, role, visible item count).
"""
import logging
import os

from flask import Flask, jsonify

from sabq import __version__, config_manager
from sabq.menus import get_menu
from sabq.nav_routes import nav_bp

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config=None):
    """
    Build the Flask app.

    Args:
        config: Navigation config dict; loaded from nav_config.yaml when omitted

    Returns:
        Flask application with the navigation blueprint registered
    """
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'sabq-nav-dev-key')

    if config is None:
        config = config_manager.load_config()
    else:
        validated, err = config_manager.validate_config(config)
        if validated is None:
            raise ValueError(f'Invalid navigation config: {err}')
        config = validated
    app.config['NAV_CONFIG'] = config

    # Build the menu up front so definition errors surface at startup
    nav_cfg = config['navigation']
    menu = get_menu(nav_cfg['menu'], nav_cfg['max_depth'])
    logger.info('Loaded menu %s with %d top-level items', nav_cfg['menu'], len(menu))

    app.register_blueprint(nav_bp)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'healthy', 'version': __version__})

    return app


def start_server():
    port = int(os.environ.get('PORT', 5000))
    create_app().run(host='0.0.0.0', port=port)


if __name__ == '__main__':
    logger.info("Starting navigation service...")
    start_server()
