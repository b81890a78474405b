"""Authentication blueprint: sign up, sign in, sign out and current user."""
from datetime import timedelta
from flask import Blueprint, request, jsonify, g, current_app
import secrets
import logging
from pydantic import ValidationError as PydanticValidationError
from werkzeug.security import generate_password_hash, check_password_hash
from ..models import db, User, AuthSession, Restroom, Review
from ..utils import api_error, handle_api_exception, current_user, login_required, enum_value, isoformat
from shared.models import now
from shared.schemas import SignUpRequest, SignInRequest, format_pydantic_error
from shared.validation import ValidationError

bp = Blueprint('auth', __name__, url_prefix='/api')
logger = logging.getLogger(__name__)


def _utcnow():
    # SQLite drops tzinfo, so sessions are stored and compared as naive UTC
    return now().replace(tzinfo=None)


def serialize_user(user):
    return {
        'id': user.id,
        'email': user.email,
        'username': user.username,
        'role': enum_value(user.role),
        'avatar_url': user.avatar_url,
        'created_at': isoformat(user.created_at),
    }


def issue_session(user):
    """Create a bearer token for ``user`` and return the session payload."""
    lifetime = timedelta(hours=current_app.config['SESSION_LIFETIME_HOURS'])
    session = AuthSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=_utcnow(),
        expires_at=_utcnow() + lifetime,
    )
    db.session.add(session)
    db.session.commit()
    return {
        'access_token': session.token,
        'token_type': 'bearer',
        'expires_at': session.expires_at.isoformat(),
        'user': serialize_user(user),
    }


@bp.route('/auth/signup', methods=['POST'])
def sign_up():
    """Register a user with its profile and start a session."""
    data = request.get_json(silent=True) or {}
    try:
        payload = SignUpRequest(**data)
    except PydanticValidationError as e:
        return api_error(str(format_pydantic_error(e)), 400)
    except ValidationError as e:
        return api_error(str(e), 400)

    if User.query.filter_by(email=payload.email).first():
        return api_error('User already registered', 400)
    if User.query.filter_by(username=payload.username).first():
        return api_error('Username already taken', 400)

    try:
        user = User(
            email=payload.email,
            username=payload.username,
            password_hash=generate_password_hash(payload.password),
        )
        db.session.add(user)
        db.session.commit()
        logger.info(f"Registered user {user.id} ({user.username})")
        return jsonify(issue_session(user)), 201
    except Exception as e:
        return handle_api_exception(e, 'register user')


@bp.route('/auth/token', methods=['POST'])
def sign_in():
    """Exchange email and password for a bearer token."""
    data = request.get_json(silent=True) or {}
    try:
        payload = SignInRequest(**data)
    except PydanticValidationError:
        return api_error('Invalid login credentials', 400)

    user = User.query.filter_by(email=payload.email).first()
    if not user or not check_password_hash(user.password_hash, payload.password):
        return api_error('Invalid login credentials', 400)

    try:
        return jsonify(issue_session(user))
    except Exception as e:
        return handle_api_exception(e, 'sign in')


@bp.route('/auth/logout', methods=['POST'])
def sign_out():
    """Invalidate the caller's bearer token."""
    token = _bearer_token()
    if not token:
        return api_error('Token required', 400)

    try:
        session = db.session.get(AuthSession, token)
        if session:
            db.session.delete(session)
            db.session.commit()
        return jsonify({'message': 'Signed out'})
    except Exception as e:
        return handle_api_exception(e, 'sign out')


@bp.route('/auth/user', methods=['GET'])
@login_required
def get_user():
    """Current user's profile with contribution counts."""
    user = current_user()
    result = serialize_user(user)
    result['restrooms_added'] = Restroom.query.filter_by(created_by=user.id).count()
    result['reviews_written'] = Review.query.filter_by(user_id=user.id).count()
    return jsonify(result)


def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header[len('Bearer '):].strip()
    return None


def init_auth(app):
    """Resolve bearer tokens to ``g.user`` before each API request.

    Requests without a valid token proceed anonymously; endpoints that need a
    user enforce it with ``login_required``.
    """
    @app.before_request
    def load_user():
        g.user = None
        if not request.path.startswith('/api'):
            return

        token = _bearer_token()
        if not token:
            return

        session = db.session.get(AuthSession, token)
        if session is None:
            return
        if session.expires_at <= _utcnow():
            logger.info(f"Expired session for user {session.user_id}")
            db.session.delete(session)
            db.session.commit()
            return
        g.user = db.session.get(User, session.user_id)
