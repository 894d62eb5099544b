"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask import current_app
from flask_login import LoginManager

from utils.api_response import api_error

# Initialize Flask-Login
login_manager = LoginManager()

# Stateless API: identity comes from a trusted header on every request
login_manager.session_protection = None


@login_manager.request_loader
def load_sharer(request):
    """
    Load the caller from the identity header set by the edge tier.

    Args:
        request: The incoming Flask request

    Returns:
        Sharer object or None if the header is missing or not numeric
    """
    from models.user import Sharer

    header = current_app.config.get('USER_ID_HEADER', 'X-Sharer-User-Id')
    raw_user_id = request.headers.get(header, '').strip()
    if not raw_user_id.isdigit():
        return None
    return Sharer(int(raw_user_id))


@login_manager.unauthorized_handler
def unauthorized():
    """Reject calls that arrive without a usable caller id."""
    header = current_app.config.get('USER_ID_HEADER', 'X-Sharer-User-Id')
    return api_error(f'Header {header} with a numeric user id is required',
                     status=401, code='UNAUTHORIZED')
