"""Restrooms blueprint: table CRUD for restroom listings."""
from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from ..models import Restroom, Review
from ..base.crud_base import CRUDBase
from ..utils import (
    api_error, current_user, is_moderator, login_required, rating_summaries, enum_value, isoformat
)
from .reviews import review_crud
from shared.enums import RestroomStatus
from shared.schemas import RestroomCreate, RestroomUpdate, format_pydantic_error
from shared.validation import ValidationError

bp = Blueprint('restrooms', __name__, url_prefix='/api')


def parse_status_filter(raw):
    """Parse ``status=active,pending_review`` into RestroomStatus members."""
    statuses = []
    for value in raw.split(','):
        value = value.strip()
        if not value:
            continue
        try:
            statuses.append(RestroomStatus(value))
        except ValueError:
            raise ValidationError(f"Unknown restroom status: {value}")
    return statuses


class RestroomCRUD(CRUDBase):
    """CRUD operations for Restroom model."""

    def __init__(self):
        super().__init__(Restroom, logger_name='restrooms')

    def serialize(self, restroom, summary=None, include_reviews=False):
        """Serialize restroom to dictionary.

        Args:
            restroom: Restroom model instance
            summary: Optional (average_rating, review_count) tuple; computed when omitted
            include_reviews: Embed reviews (newest first) with author usernames
        """
        if summary is None:
            summary = rating_summaries([restroom.id]).get(restroom.id, (None, 0))
        average_rating, review_count = summary

        result = {
            'id': restroom.id,
            'name': restroom.name,
            'address': restroom.address,
            'latitude': restroom.latitude,
            'longitude': restroom.longitude,
            'description': restroom.description,
            'accessibility_features': list(restroom.accessibility_features or []),
            'operating_hours': restroom.operating_hours,
            'access_requirements': restroom.access_requirements,
            'created_by': restroom.created_by,
            'status': enum_value(restroom.status),
            'created_at': isoformat(restroom.created_at),
            'updated_at': isoformat(restroom.updated_at),
            'average_rating': average_rating,
            'review_count': review_count,
        }

        if include_reviews:
            result['reviews'] = [review_crud.serialize(r) for r in restroom.reviews]

        return result

    def serialize_many(self, restrooms):
        summaries = rating_summaries(r.id for r in restrooms)
        return [self.serialize(r, summaries.get(r.id, (None, 0))) for r in restrooms]

    def validate_create_data(self, data):
        """Validate a new listing; the caller becomes its creator."""
        user = current_user()
        created_by = data.get('created_by')
        if created_by and created_by != user.id:
            raise PermissionError('created_by must match the signed-in user')

        try:
            restroom = RestroomCreate(**data)
        except PydanticValidationError as e:
            raise format_pydantic_error(e)

        validated = restroom.model_dump()
        validated['created_by'] = user.id
        # New listings always wait for moderation
        validated['status'] = RestroomStatus.PENDING_REVIEW
        return validated

    def validate_update(self, data, restroom):
        """Validate a partial update against row ownership rules."""
        user = current_user()
        if restroom.created_by != user.id and not is_moderator(user):
            raise PermissionError('Only the creator or a moderator can edit this restroom')

        data = {k: v for k, v in data.items() if k not in ('id', 'created_by', 'created_at', 'updated_at')}
        try:
            update = RestroomUpdate(**data)
        except PydanticValidationError as e:
            raise format_pydantic_error(e)

        validated = update.model_dump(exclude_unset=True)
        if 'status' in validated and not is_moderator(user):
            raise PermissionError('Only moderators can change restroom status')
        for key in ('name', 'address', 'latitude', 'longitude'):
            if key in validated and validated[key] is None:
                raise ValidationError(f'{key} cannot be empty')
        return validated


restroom_crud = RestroomCRUD()


@bp.route('/restrooms', methods=['GET'])
def list_restrooms():
    """List restrooms with optional status, creator and text filters.

    Pages are at most RESTROOM_LIST_LIMIT rows; use ``offset`` for the rest.
    """
    query = Restroom.query

    try:
        status_param = request.args.get('status')
        if status_param:
            query = query.filter(Restroom.status.in_(parse_status_filter(status_param)))
    except ValidationError as e:
        return api_error(str(e), 400)

    created_by = request.args.get('created_by')
    if created_by:
        query = query.filter(Restroom.created_by == created_by)

    text = request.args.get('q', '').strip()
    if text:
        pattern = f"%{text}%"
        query = query.filter(or_(Restroom.name.ilike(pattern), Restroom.address.ilike(pattern)))

    max_limit = current_app.config['RESTROOM_LIST_LIMIT']
    limit = request.args.get('limit', max_limit, type=int)
    limit = max(1, min(limit, max_limit))
    offset = max(0, request.args.get('offset', 0, type=int))

    # id breaks created_at ties so pages never overlap
    restrooms = (query.order_by(Restroom.created_at.desc(), Restroom.id)
                 .offset(offset).limit(limit).all())
    return jsonify(restroom_crud.serialize_many(restrooms))


@bp.route('/restrooms/<restroom_id>', methods=['GET'])
def get_restroom(restroom_id):
    """Get one restroom with its reviews embedded."""
    restroom = restroom_crud.get_or_none(restroom_id)
    if restroom is None:
        return api_error('Restroom not found', 404)
    return jsonify(restroom_crud.serialize(restroom, include_reviews=True))


@bp.route('/restrooms', methods=['POST'])
@login_required
def create_restroom():
    """Create a restroom listing (pending review)."""
    return restroom_crud.create()


@bp.route('/restrooms/<restroom_id>', methods=['PUT', 'PATCH'])
@login_required
def update_restroom(restroom_id):
    """Update a restroom listing."""
    return restroom_crud.update(restroom_id, validate_func=restroom_crud.validate_update)


@bp.route('/restrooms/<restroom_id>/reviews', methods=['GET'])
def list_restroom_reviews(restroom_id):
    """Reviews for a restroom, newest first."""
    if restroom_crud.get_or_none(restroom_id) is None:
        return api_error('Restroom not found', 404)
    reviews = (Review.query.filter_by(restroom_id=restroom_id)
               .order_by(Review.created_at.desc()).all())
    return jsonify([review_crud.serialize(r) for r in reviews])
