"""Pydantic schemas for validation of data service request bodies."""
from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from shared.enums import RestroomStatus, OperationalStatus, ReportType, ReportStatus
from shared.validation import Validator, ValidationError


def format_pydantic_error(error: PydanticValidationError) -> ValidationError:
    """Flatten a pydantic error into a single ValidationError message."""
    errors = []
    for item in error.errors():
        field = '.'.join(str(x) for x in item['loc'])
        errors.append(f"{field}: {item['msg']}" if field else item['msg'])
    return ValidationError('; '.join(errors))


def _clean_text(v):
    if v is None:
        return v
    v = v.strip()
    return Validator.sanitize_html(v) if v else None


# Auth Schemas
class SignUpRequest(BaseModel):
    email: str
    password: str
    username: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return Validator.validate_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return Validator.validate_password(v)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return Validator.validate_username(v)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


# Restroom Schemas
class RestroomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    description: Optional[str] = Field(None, max_length=2000)
    accessibility_features: List[str] = Field(default_factory=list)
    operating_hours: Optional[str] = Field(None, max_length=200)
    access_requirements: Optional[str] = Field(None, max_length=500)
    created_by: Optional[str] = None

    @field_validator('name', 'address')
    @classmethod
    def validate_required_text(cls, v):
        return Validator.validate_string_length(v, 'value', 1)

    @field_validator('description', 'operating_hours', 'access_requirements')
    @classmethod
    def sanitize_text_fields(cls, v):
        return _clean_text(v)

    @field_validator('accessibility_features')
    @classmethod
    def dedupe_features(cls, v):
        seen = []
        for feature in v:
            feature = feature.strip()
            if feature and feature not in seen:
                seen.append(feature)
        return seen


class RestroomUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: Optional[str] = Field(None, max_length=2000)
    accessibility_features: Optional[List[str]] = None
    operating_hours: Optional[str] = Field(None, max_length=200)
    access_requirements: Optional[str] = Field(None, max_length=500)
    status: Optional[RestroomStatus] = None

    @field_validator('name', 'address')
    @classmethod
    def validate_required_text(cls, v):
        # None is refused later with a field-specific message
        if v is None:
            return v
        return Validator.validate_string_length(v, 'value', 1)

    @field_validator('description', 'operating_hours', 'access_requirements')
    @classmethod
    def sanitize_text_fields(cls, v):
        return _clean_text(v)


# Review Schemas
class ReviewCreate(BaseModel):
    restroom_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    cleanliness_rating: int = Field(..., ge=1, le=5)
    operational_status: OperationalStatus
    visit_date: date
    comments: Optional[str] = Field(None, max_length=2000)
    photos: List[str] = Field(default_factory=list)

    @field_validator('comments')
    @classmethod
    def sanitize_comments(cls, v):
        return _clean_text(v)


# Report Schemas
class ReportCreate(BaseModel):
    restroom_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    report_type: ReportType
    description: str = Field(..., min_length=1, max_length=2000)

    @field_validator('description')
    @classmethod
    def sanitize_description(cls, v):
        return Validator.sanitize_html(Validator.validate_string_length(v, 'description', 1))


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


# Remote procedure parameters
class NearbySearchParams(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    radius_meters: float = Field(5000, gt=0)

    model_config = ConfigDict(extra='ignore')
