"""
Item request API routes.
Users post what they are looking for; owners answer with items.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user

from models.item_request import (
    create_item_request,
    get_item_request_with_items,
    get_item_requests_by_requestor,
    get_all_item_requests,
)
from models.user import get_user_or_raise
from utils.api_response import api_success
from utils.exceptions import NotFoundError, ValidationError
from utils.validators import get_json_body, sanitize_input

logger = logging.getLogger(__name__)

requests_bp = Blueprint('requests', __name__)


@requests_bp.route('', methods=['POST'])
@login_required
def create():
    """
    Post an item request.

    Request body:
        description: What the caller is looking for
    """
    data = get_json_body(request)
    description = data.get('description')
    if not isinstance(description, str) or not description.strip():
        raise ValidationError('description must not be blank', field='description')

    get_user_or_raise(current_user.id)
    item_request = create_item_request(current_user.id, sanitize_input(description, 1000))
    logger.info(f"Item request {item_request['id']} created by user {current_user.id}")
    return api_success(data=item_request, status=201)


@requests_bp.route('', methods=['GET'])
@login_required
def list_own():
    """List the caller's requests, newest first, with answering items."""
    get_user_or_raise(current_user.id)
    return api_success(data=get_item_requests_by_requestor(current_user.id))


@requests_bp.route('/all', methods=['GET'])
@login_required
def list_all():
    """List every item request, newest first."""
    return api_success(data=get_all_item_requests())


@requests_bp.route('/<int:request_id>', methods=['GET'])
@login_required
def detail(request_id):
    """Get one item request with answering items."""
    item_request = get_item_request_with_items(request_id)
    if item_request is None:
        raise NotFoundError('ItemRequest', request_id)
    return api_success(data=item_request)
