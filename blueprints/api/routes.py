"""
Service API routes.
Health check for load balancers and monitoring.
"""

from flask import Blueprint, current_app, jsonify

from database import get_db

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status, version and database reachability
    """
    get_db().execute('SELECT 1')

    return jsonify({
        'status': 'ok',
        'version': current_app.config['APP_VERSION'],
        'app': current_app.config['APP_NAME']
    })
