"""
Item API routes.
Item listing, search and owner maintenance, plus renter comments.
"""

from flask import Blueprint, request
from flask_login import login_required, current_user

from blueprints.items.services.item_service import (
    add_item,
    edit_item,
    get_item_view,
    get_owner_items,
    find_items,
    add_comment,
    edit_comment,
    remove_comment,
)
from utils.api_response import api_success
from utils.exceptions import ValidationError
from utils.validators import get_json_body, sanitize_input, parse_bool, parse_positive_int

items_bp = Blueprint('items', __name__)


def _required_text(data: dict, field: str, max_length: int) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} must not be blank', field=field)
    return sanitize_input(value, max_length)


def _optional_text(data: dict, field: str, max_length: int):
    if data.get(field) is None:
        return None
    return _required_text(data, field, max_length)


# =============================================================================
# ITEMS
# =============================================================================

@items_bp.route('', methods=['POST'])
@login_required
def create():
    """
    Create an item owned by the caller.

    Request body:
        name, description: Non-blank text
        available: Boolean
        requestId: Item request answered by this item (optional)
    """
    data = get_json_body(request)
    name = _required_text(data, 'name', 255)
    description = _required_text(data, 'description', 1000)
    if data.get('available') is None:
        raise ValidationError('available is required', field='available')
    available = parse_bool(data['available'], 'available')

    request_id = None
    if data.get('requestId') is not None:
        request_id = parse_positive_int(data['requestId'], 'requestId')

    item = add_item(current_user.id, name, description, available, request_id)
    return api_success(data=item, status=201)


@items_bp.route('/<int:item_id>', methods=['PATCH'])
@login_required
def update(item_id):
    """Partially update one of the caller's items."""
    data = get_json_body(request)
    available = data.get('available')
    if available is not None:
        available = parse_bool(available, 'available')

    item = edit_item(
        item_id,
        current_user.id,
        name=_optional_text(data, 'name', 255),
        description=_optional_text(data, 'description', 1000),
        available=available
    )
    return api_success(data=item)


@items_bp.route('', methods=['GET'])
@login_required
def list_owned():
    """List the caller's items with their last and next bookings."""
    return api_success(data=get_owner_items(current_user.id))


@items_bp.route('/<int:item_id>', methods=['GET'])
@login_required
def detail(item_id):
    """Get one item with comments."""
    return api_success(data=get_item_view(item_id, current_user.id))


@items_bp.route('/search', methods=['GET'])
def search():
    """
    Search available items (no caller required).

    Query params:
        text: Text to find in name or description
    """
    return api_success(data=find_items(request.args.get('text', '')))


# =============================================================================
# COMMENTS
# =============================================================================

@items_bp.route('/<int:item_id>/comment', methods=['POST'])
@login_required
def comment_create(item_id):
    """Comment on an item the caller has rented."""
    data = get_json_body(request)
    text = _required_text(data, 'text', 2000)
    return api_success(data=add_comment(item_id, current_user.id, text), status=201)


@items_bp.route('/<int:item_id>/comment/<int:comment_id>', methods=['PATCH'])
@login_required
def comment_update(item_id, comment_id):
    """Change the text of the caller's comment."""
    data = get_json_body(request)
    text = _optional_text(data, 'text', 2000)
    return api_success(data=edit_comment(item_id, comment_id, current_user.id, text))


@items_bp.route('/<int:item_id>/comment/<int:comment_id>', methods=['DELETE'])
@login_required
def comment_delete(item_id, comment_id):
    """Delete one of the caller's comments."""
    remove_comment(item_id, comment_id, current_user.id)
    return api_success(message='Comment deleted')
