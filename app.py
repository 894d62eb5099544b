"""
ShareIt - Peer-to-peer item sharing service
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager

# Import database functions
from database import close_db, init_db

from utils.api_response import api_error, api_no_content
from utils.exceptions import ShareItError, NoBookingsError


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)
    app.json.sort_keys = False

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login (header based caller identity)
    login_manager.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.users.routes import users_bp
    from blueprints.items.routes import items_bp
    from blueprints.requests.routes import requests_bp
    from blueprints.bookings.routes import bookings_bp
    from blueprints.api.routes import api_bp

    # Register blueprints
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(items_bp, url_prefix='/items')
    app.register_blueprint(requests_bp, url_prefix='/requests')
    app.register_blueprint(bookings_bp, url_prefix='/bookings')
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(ShareItError)
    def domain_error(error):
        """Render domain errors with their HTTP status."""
        app.logger.warning(f'{type(error).__name__}: {error}')
        if isinstance(error, NoBookingsError):
            return api_no_content()
        return api_error(str(error), status=error.status_code, **error.to_payload())

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Resource not found', status=404, code='NOT_FOUND')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error('Method not allowed', status=405, code='METHOD_NOT_ALLOWED')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        app.logger.error(f'Unhandled error: {error}')
        return api_error('Internal server error', status=500, code='INTERNAL_ERROR')


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Drop and recreate the database schema."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('clear-bookings')
    @click.confirmation_option(prompt='Delete every booking?')
    def clear_bookings_command():
        """Delete all bookings (administrative reset)."""
        from blueprints.bookings.services import clear_all_bookings

        with app.app_context():
            deleted = clear_all_bookings()
        click.echo(f'Deleted {deleted} bookings.')


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/shareit.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('ShareIt startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)

    @app.cli.command('delete-booking')
    @click.argument('booking_id', type=int)
    def delete_booking_command(booking_id):
        """Delete one booking by id."""
        from blueprints.bookings.services import remove_booking
        from utils.exceptions import NotFoundError

        with app.app_context():
            try:
                remove_booking(booking_id)
            except NotFoundError as e:
                raise click.ClickException(str(e))
        click.echo(f'Deleted booking {booking_id}.')
