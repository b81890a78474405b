"""Reports blueprint: user reports about restroom listings and their moderation."""
from flask import Blueprint, request, jsonify
from pydantic import ValidationError as PydanticValidationError
from ..models import Report
from ..base.crud_base import CRUDBase
from ..utils import (
    api_error, current_user, login_required, moderator_required, validate_foreign_key, enum_value, isoformat
)
from shared.enums import ReportStatus
from shared.schemas import ReportCreate, ReportStatusUpdate, format_pydantic_error
from shared.validation import ValidationError

bp = Blueprint('reports', __name__, url_prefix='/api')


class ReportCRUD(CRUDBase):
    """CRUD operations for Report model."""

    def __init__(self):
        super().__init__(Report, logger_name='reports')

    def serialize(self, report):
        return {
            'id': report.id,
            'restroom_id': report.restroom_id,
            'user_id': report.user_id,
            'report_type': enum_value(report.report_type),
            'description': report.description,
            'status': enum_value(report.status),
            'created_at': isoformat(report.created_at),
        }

    def validate_create_data(self, data):
        user = current_user()
        if data.get('user_id') and data['user_id'] != user.id:
            raise PermissionError('user_id must match the signed-in user')

        try:
            report = ReportCreate(**data)
        except PydanticValidationError as e:
            raise format_pydantic_error(e)

        if not validate_foreign_key('restrooms', report.restroom_id):
            raise ValidationError(f'Restroom {report.restroom_id} does not exist')

        validated = report.model_dump()
        validated['user_id'] = user.id
        validated['status'] = ReportStatus.PENDING
        return validated

    def validate_update_data(self, data):
        try:
            return ReportStatusUpdate(**data).model_dump()
        except PydanticValidationError as e:
            raise format_pydantic_error(e)


report_crud = ReportCRUD()


@bp.route('/reports', methods=['POST'])
@login_required
def create_report():
    """Report a problem with a restroom listing."""
    return report_crud.create()


@bp.route('/reports', methods=['GET'])
@moderator_required
def list_reports():
    """Moderation queue, oldest first, optionally filtered by status."""
    query = Report.query
    status = request.args.get('status')
    if status:
        try:
            query = query.filter(Report.status == ReportStatus(status))
        except ValueError:
            return api_error(f'Unknown report status: {status}', 400)
    reports = query.order_by(Report.created_at.asc()).all()
    return jsonify([report_crud.serialize(r) for r in reports])


@bp.route('/reports/<report_id>', methods=['PUT', 'PATCH'])
@moderator_required
def update_report(report_id):
    """Move a report through the moderation workflow."""
    return report_crud.update(report_id)
