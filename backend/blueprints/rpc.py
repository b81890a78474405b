"""Remote procedures: server-side query functions invoked by name."""
from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError as PydanticValidationError
import logging
from ..models import Restroom
from ..utils import api_error, handle_api_exception
from .restrooms import restroom_crud
from shared.enums import VISIBLE_RESTROOM_STATUSES
from shared.schemas import NearbySearchParams, format_pydantic_error
from shared.utils import bounding_box, filter_by_radius

bp = Blueprint('rpc', __name__, url_prefix='/api/rpc')
logger = logging.getLogger(__name__)


def nearby_restrooms(lat, lng, radius_meters):
    """Visible restrooms within ``radius_meters`` of a point, nearest first.

    A bounding box narrows the candidate rows in SQL; the haversine distance
    then decides membership exactly.
    """
    min_lat, max_lat, min_lng, max_lng = bounding_box(lat, lng, radius_meters)

    query = Restroom.query.filter(
        Restroom.status.in_(VISIBLE_RESTROOM_STATUSES),
        Restroom.latitude.between(min_lat, max_lat),
    )
    # A box crossing the antimeridian or touching a pole cannot be expressed
    # as one longitude range
    if min_lng >= -180.0 and max_lng <= 180.0 and -90.0 < min_lat and max_lat < 90.0:
        query = query.filter(Restroom.longitude.between(min_lng, max_lng))

    candidates = restroom_crud.serialize_many(query.all())
    return filter_by_radius(candidates, lat, lng, radius_meters)


@bp.route('/get_nearby_restrooms', methods=['POST'])
def get_nearby_restrooms():
    """Nearby search: ``{lat, lng, radius_meters}`` -> restrooms with ``distance`` (km)."""
    if not current_app.config['NEARBY_RPC_ENABLED']:
        return api_error('Function not found', 404, 'info')

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error('Request body must be a JSON object', 400)

    try:
        params = NearbySearchParams(**data)
    except PydanticValidationError as e:
        return api_error(str(format_pydantic_error(e)), 400)

    radius = min(params.radius_meters, current_app.config['MAX_NEARBY_RADIUS_METERS'])

    try:
        results = nearby_restrooms(params.lat, params.lng, radius)
        logger.debug(f"Nearby search ({params.lat}, {params.lng}) r={radius}m -> {len(results)} results")
        return jsonify(results)
    except Exception as e:
        return handle_api_exception(e, 'search nearby restrooms')
