"""
User API routes.
Plain user records; no caller header is required.
"""

import logging

from flask import Blueprint, request

from models.user import (
    user_to_dict,
    get_user_or_raise,
    get_all_users,
    create_user,
    update_user,
    delete_user,
)
from utils.api_response import api_success
from utils.exceptions import NotFoundError, ValidationError
from utils.validators import get_json_body, sanitize_input, validate_email

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


def _parse_name(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError('name must not be blank', field='name')
    return sanitize_input(value, 255)


def _parse_email(value) -> str:
    email = sanitize_input(value, 255) if isinstance(value, str) else ''
    if not validate_email(email):
        raise ValidationError('email must be a valid address', field='email')
    return email


@users_bp.route('', methods=['POST'])
def create():
    """
    Register a user.

    Request body:
        name: Display name
        email: Unique email address
    """
    data = get_json_body(request)
    user = create_user(_parse_name(data.get('name')), _parse_email(data.get('email')))
    logger.info(f"User {user['id']} created")
    return api_success(data=user_to_dict(user), status=201)


@users_bp.route('', methods=['GET'])
def list_all():
    """List all users."""
    return api_success(data=[user_to_dict(user) for user in get_all_users()])


@users_bp.route('/<int:user_id>', methods=['GET'])
def detail(user_id):
    """Get one user."""
    return api_success(data=user_to_dict(get_user_or_raise(user_id)))


@users_bp.route('/<int:user_id>', methods=['PATCH'])
def update(user_id):
    """Partially update name and/or email."""
    data = get_json_body(request)
    name = _parse_name(data['name']) if data.get('name') is not None else None
    email = _parse_email(data['email']) if data.get('email') is not None else None

    user = update_user(user_id, name=name, email=email)
    return api_success(data=user_to_dict(user))


@users_bp.route('/<int:user_id>', methods=['DELETE'])
def delete(user_id):
    """Delete a user together with their items and bookings."""
    if not delete_user(user_id):
        raise NotFoundError('User', user_id)
    logger.info(f"User {user_id} deleted")
    return api_success(message='User deleted')
