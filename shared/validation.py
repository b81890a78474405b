"""Input validation utilities."""
import re
import bleach


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


class Validator:
    """Input validation utilities."""

    # Email pattern: local part must start/end with alphanumeric, no consecutive dots/special chars
    # Domain parts must start/end with alphanumeric, no consecutive dots/hyphens
    EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9]+([._%+-][a-zA-Z0-9]+)*@([a-zA-Z0-9]+([.-][a-zA-Z0-9]+)*\.)+[a-zA-Z]{2,}$')
    USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]{2,80}$')
    MIN_PASSWORD_LENGTH = 6

    @staticmethod
    def validate_string_length(value, field_name, min_length=0, max_length=None):
        """Validate string length constraints."""
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        value = value.strip()
        if len(value) < min_length:
            raise ValidationError(f"{field_name} must be at least {min_length} characters")

        if max_length and len(value) > max_length:
            raise ValidationError(f"{field_name} must be no more than {max_length} characters")

        return value

    @staticmethod
    def validate_email(email):
        """Validate email format."""
        if not isinstance(email, str) or not Validator.EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Invalid email")
        return email.strip().lower()

    @staticmethod
    def validate_username(username):
        """Validate username characters and length."""
        if not isinstance(username, str) or not Validator.USERNAME_PATTERN.match(username.strip()):
            raise ValidationError("Username must be 2-80 letters, digits, dots, dashes or underscores")
        return username.strip()

    @staticmethod
    def validate_password(password):
        """Validate minimum password length (matches the hosted auth default)."""
        if not isinstance(password, str) or len(password) < Validator.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password should be at least {Validator.MIN_PASSWORD_LENGTH} characters")
        return password

    @staticmethod
    def sanitize_html(text):
        """Strip markup from user-supplied text using bleach.

        Plain text (the common case) is returned untouched.
        """
        if not text:
            return text

        if '<' not in text and '>' not in text and '&' not in text:
            return text

        allowed_tags = ['p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li']
        return bleach.clean(text, tags=allowed_tags, attributes={}, strip=True)

    @staticmethod
    def check_restroom_presence(data):
        """Client-side presence check run before submitting a new restroom.

        The data service performs full validation; this only catches obviously
        incomplete payloads.
        """
        required = ('name', 'address', 'latitude', 'longitude', 'created_by')
        for key in required:
            value = data.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError('Missing required fields: name, address, location, or user ID')
        return data
