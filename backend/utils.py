"""Backend utility functions for the Restroom Finder data service."""
from functools import wraps
from flask import jsonify, g
from sqlalchemy import func
from .models import db, User, Restroom, Review
from shared.enums import UserRole
import logging


logger = logging.getLogger(__name__)


def api_error(message, status_code=400, log_level='warning', details=None):
    """
    Standardized API error response with consistent logging.

    Args:
        message (str): Error message for the client
        status_code (int): HTTP status code
        log_level (str): Logging level ('debug', 'info', 'warning', 'error', 'critical')
        details (dict, optional): Additional details for logging

    Returns:
        Flask response: JSON error response
    """
    log_func = getattr(logger, log_level, logger.warning)
    if details:
        log_func(f"API Error ({status_code}): {message} - Details: {details}")
    else:
        log_func(f"API Error ({status_code}): {message}")

    return jsonify({'error': message}), status_code


def handle_api_exception(e, operation="operation", status_code=500):
    """
    Handle exceptions in API endpoints with consistent logging and responses.

    Rolls back the current session so the next request starts clean.

    Args:
        e (Exception): The exception that occurred
        operation (str): Description of the operation being performed
        status_code (int): HTTP status code to return

    Returns:
        Flask response: JSON error response
    """
    logger.error(f"Exception during {operation}: {str(e)}", exc_info=True)
    db.session.rollback()
    return api_error(f"Failed to {operation}", status_code, 'error')


def validate_foreign_key(table_name, value):
    """
    Validate that a foreign key reference exists.

    Args:
        table_name (str): Name of the table being referenced
        value: Primary key to check

    Returns:
        bool: True if reference exists or value is None, False otherwise
    """
    if value is None:
        return True

    models = {'users': User, 'restrooms': Restroom, 'reviews': Review}
    model = models.get(table_name)
    if model is None:
        logger.warning(f"Unknown table for FK validation: {table_name}")
        return False
    return db.session.get(model, value) is not None


def current_user():
    """Return the authenticated user for this request, or None."""
    return getattr(g, 'user', None)


def is_moderator(user):
    return user is not None and user.role == UserRole.MODERATOR


def login_required(view):
    """Reject the request with 401 unless a valid bearer token was sent."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return api_error('Authentication required', 401)
        return view(*args, **kwargs)
    return wrapped


def moderator_required(view):
    """Reject the request unless the caller is a moderator."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            return api_error('Authentication required', 401)
        if not is_moderator(user):
            return api_error('Moderator privileges required', 403)
        return view(*args, **kwargs)
    return wrapped


def rating_summaries(restroom_ids):
    """Average cleanliness rating and review count per restroom.

    Args:
        restroom_ids: Iterable of restroom ids

    Returns:
        dict: restroom_id -> (average_rating or None, review_count)
    """
    restroom_ids = list(restroom_ids)
    if not restroom_ids:
        return {}
    rows = (db.session.query(Review.restroom_id,
                             func.avg(Review.cleanliness_rating),
                             func.count(Review.id))
            .filter(Review.restroom_id.in_(restroom_ids))
            .group_by(Review.restroom_id)
            .all())
    return {rid: (round(float(avg), 2) if avg is not None else None, count) for rid, avg, count in rows}


def enum_value(value):
    """Serialize an enum member (or plain value) to its string value."""
    return value.value if hasattr(value, 'value') else value


def isoformat(value):
    return value.isoformat() if value is not None else None
