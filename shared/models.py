import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, Text, Date, DateTime, ForeignKey, Index, text, Enum, CheckConstraint, JSON
from sqlalchemy.orm import relationship, declarative_base
from shared.enums import RestroomStatus, OperationalStatus, ReportType, ReportStatus, UserRole

Base = declarative_base()

# The data service stores every timestamp in UTC
# When stored in SQLite, timezone info is stripped (SQLite limitation)
APP_TIMEZONE = timezone.utc


def now():
    """Return current datetime in application timezone (UTC, timezone-aware)."""
    return datetime.now(APP_TIMEZONE)


def new_id():
    """Generate a primary key in the hosted service's UUID string format."""
    return str(uuid.uuid4())


class TimestampMixin:
    """Mixin providing created/updated timestamps."""

    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)


class User(Base):
    __tablename__ = 'users'
    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(120), unique=True, nullable=False, server_default="")
    username = Column(String(80), unique=True, nullable=False, server_default="")
    password_hash = Column(String(256), nullable=False, server_default="")
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False, server_default=text("'USER'"))
    avatar_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=now)
    sessions = relationship('AuthSession', backref='user', lazy='select', cascade="all, delete-orphan")
    restrooms = relationship('Restroom', backref='creator', lazy='select')
    reviews = relationship('Review', backref='author', lazy='select')


class AuthSession(Base):
    """Bearer token issued at sign-in."""
    __tablename__ = 'auth_sessions'
    token = Column(String(100), primary_key=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime, default=now)
    expires_at = Column(DateTime, nullable=False)


class Restroom(Base, TimestampMixin):
    __tablename__ = 'restrooms'
    id = Column(String(36), primary_key=True, default=new_id)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(Text, nullable=False, server_default="")
    name = Column(String(200), nullable=False, server_default="")
    description = Column(Text, nullable=True)
    accessibility_features = Column(JSON, default=list, server_default="[]")
    operating_hours = Column(String(200), nullable=True)
    access_requirements = Column(String(500), nullable=True)
    created_by = Column(String(36), ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    status = Column(Enum(RestroomStatus), default=RestroomStatus.PENDING_REVIEW, nullable=False,
                    server_default=text("'PENDING_REVIEW'"))
    reviews = relationship('Review', backref='restroom', lazy='select', cascade="all, delete-orphan",
                           order_by='Review.created_at.desc()')
    reports = relationship('Report', backref='restroom', lazy='select', cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('latitude >= -90.0 AND latitude <= 90.0', name='chk_restroom_latitude_range'),
        CheckConstraint('longitude >= -180.0 AND longitude <= 180.0', name='chk_restroom_longitude_range'),
    )

Index('idx_restroom_lat_lng', Restroom.latitude, Restroom.longitude)
Index('idx_restroom_status', Restroom.status)


class Review(Base):
    __tablename__ = 'reviews'
    id = Column(String(36), primary_key=True, default=new_id)
    restroom_id = Column(String(36), ForeignKey('restrooms.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    cleanliness_rating = Column(Integer, nullable=False)
    operational_status = Column(Enum(OperationalStatus), nullable=False)
    visit_date = Column(Date, nullable=False)
    comments = Column(Text, nullable=True)
    photos = Column(JSON, default=list, server_default="[]")
    created_at = Column(DateTime, default=now, index=True)

    __table_args__ = (
        CheckConstraint('cleanliness_rating >= 1 AND cleanliness_rating <= 5', name='chk_review_rating_range'),
    )


class Report(Base):
    __tablename__ = 'reports'
    id = Column(String(36), primary_key=True, default=new_id)
    restroom_id = Column(String(36), ForeignKey('restrooms.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    report_type = Column(Enum(ReportType), nullable=False)
    description = Column(Text, nullable=False, server_default="")
    status = Column(Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False, server_default=text("'PENDING'"))
    created_at = Column(DateTime, default=now)

Index('idx_report_status', Report.status)
