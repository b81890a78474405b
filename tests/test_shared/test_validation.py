"""Tests for shared validation utilities."""
import pytest
from pydantic import ValidationError as PydanticValidationError
from shared.validation import Validator, ValidationError
from shared.schemas import RestroomCreate, ReviewCreate, NearbySearchParams, SignUpRequest, format_pydantic_error


class TestValidator:
    """Test validation utilities."""

    def test_validate_string_length(self):
        assert Validator.validate_string_length("  test  ", "field", 1, 10) == "test"
        with pytest.raises(ValidationError, match="field must be at least 5 characters"):
            Validator.validate_string_length("test", "field", 5, 10)
        with pytest.raises(ValidationError, match="field must be no more than 3 characters"):
            Validator.validate_string_length("testing", "field", 1, 3)

    def test_validate_email(self):
        """Test email normalization and rejection of malformed addresses."""
        assert Validator.validate_email(" User@Example.COM ") == "user@example.com"
        for bad in ("user@", "@example.com", "user..name@example.com", "user@example", None):
            with pytest.raises(ValidationError, match="Invalid email"):
                Validator.validate_email(bad)

    def test_validate_password(self):
        assert Validator.validate_password("secret") == "secret"
        with pytest.raises(ValidationError, match="at least 6 characters"):
            Validator.validate_password("12345")

    def test_validate_username(self):
        assert Validator.validate_username(" jane_doe ") == "jane_doe"
        with pytest.raises(ValidationError):
            Validator.validate_username("a")
        with pytest.raises(ValidationError):
            Validator.validate_username("has space")

    def test_sanitize_html(self):
        """Test that scripts are stripped and plain text passes through."""
        assert Validator.sanitize_html("Plain text") == "Plain text"
        assert Validator.sanitize_html("") == ""
        cleaned = Validator.sanitize_html('<script>x</script><b>bold</b> <a href="#">link</a>')
        assert "<script>" not in cleaned
        assert "<a" not in cleaned
        assert "bold" in cleaned

    def test_check_restroom_presence(self):
        data = {'name': 'A', 'address': 'B', 'latitude': 1.0, 'longitude': 2.0, 'created_by': 'u1'}
        assert Validator.check_restroom_presence(data) is data
        for key in ('name', 'address', 'latitude', 'longitude', 'created_by'):
            incomplete = dict(data, **{key: None})
            with pytest.raises(ValidationError, match="Missing required fields"):
                Validator.check_restroom_presence(incomplete)


class TestSchemas:
    """Test request body schemas."""

    def test_restroom_create_dedupes_features(self):
        restroom = RestroomCreate(
            name='Library', address='100 Larkin St', latitude=37.779, longitude=-122.416,
            accessibility_features=['Grab Bars', ' Grab Bars ', '', 'Wide Doorway'],
            operating_hours='  ',
        )
        assert restroom.accessibility_features == ['Grab Bars', 'Wide Doorway']
        assert restroom.operating_hours is None

    def test_restroom_create_coordinate_range(self):
        with pytest.raises(PydanticValidationError):
            RestroomCreate(name='A', address='B', latitude=0, longitude=200)

    def test_review_create_rating_range(self):
        with pytest.raises(PydanticValidationError):
            ReviewCreate(restroom_id='r1', cleanliness_rating=0, operational_status='working',
                         visit_date='2024-01-01')
        review = ReviewCreate(restroom_id='r1', cleanliness_rating=5, operational_status='broken',
                              visit_date='2024-01-01')
        assert review.operational_status.value == 'broken'

    def test_nearby_params_defaults(self):
        params = NearbySearchParams(lat=1, lng=2, extra='ignored')
        assert params.radius_meters == 5000

    def test_sign_up_request_normalizes_email(self):
        request = SignUpRequest(email='Jane@Example.com', password='secret1', username='jane')
        assert request.email == 'jane@example.com'

    def test_format_pydantic_error(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            NearbySearchParams(lat=100, lng=0)
        error = format_pydantic_error(exc_info.value)
        assert isinstance(error, ValidationError)
        assert str(error).startswith('lat:')
