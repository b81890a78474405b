"""Reviews blueprint."""
from flask import Blueprint
from pydantic import ValidationError as PydanticValidationError
from ..models import Review
from ..base.crud_base import CRUDBase
from ..utils import current_user, login_required, validate_foreign_key, enum_value, isoformat
from shared.schemas import ReviewCreate, format_pydantic_error
from shared.validation import ValidationError

bp = Blueprint('reviews', __name__, url_prefix='/api')


class ReviewCRUD(CRUDBase):
    """CRUD operations for Review model."""

    def __init__(self):
        super().__init__(Review, logger_name='reviews')

    def serialize(self, review):
        author = review.author
        return {
            'id': review.id,
            'restroom_id': review.restroom_id,
            'user_id': review.user_id,
            'cleanliness_rating': review.cleanliness_rating,
            'operational_status': enum_value(review.operational_status),
            'visit_date': isoformat(review.visit_date),
            'comments': review.comments,
            'photos': list(review.photos or []),
            'created_at': isoformat(review.created_at),
            'users': {'username': author.username if author else None},
        }

    def validate_create_data(self, data):
        user = current_user()
        if data.get('user_id') and data['user_id'] != user.id:
            raise PermissionError('user_id must match the signed-in user')

        try:
            review = ReviewCreate(**data)
        except PydanticValidationError as e:
            raise format_pydantic_error(e)

        if not validate_foreign_key('restrooms', review.restroom_id):
            raise ValidationError(f'Restroom {review.restroom_id} does not exist')

        validated = review.model_dump()
        validated['user_id'] = user.id
        return validated


review_crud = ReviewCRUD()


@bp.route('/reviews', methods=['POST'])
@login_required
def create_review():
    """Submit a review for a restroom."""
    return review_crud.create()
