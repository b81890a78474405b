from flask_sqlalchemy import SQLAlchemy
import logging
from shared.models import (
    Base, User, AuthSession, Restroom, Review, Report,
    RestroomStatus, OperationalStatus, ReportType, ReportStatus, UserRole
)

logger = logging.getLogger(__name__)
db = SQLAlchemy(model_class=Base)
