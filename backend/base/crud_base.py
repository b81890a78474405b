"""Base CRUD class for Flask blueprints."""
from flask import jsonify, request
from typing import Type, Optional, Dict, Any, Callable
from sqlalchemy.orm import DeclarativeBase
from shared.validation import ValidationError
from ..models import db
import logging


class CRUDBase:
    """Base class providing common CRUD operations for table endpoints.

    Handles request parsing, creation and update with validation, rollback
    and logging. Subclasses should override:
    - serialize() - to customize serialization
    - validate_create_data() - to customize creation validation
    - validate_update_data() - to customize update validation
    """

    def __init__(self, model_class: Type[DeclarativeBase], logger_name: Optional[str] = None):
        """Initialize CRUD base class.

        Args:
            model_class: SQLAlchemy model class
            logger_name: Optional logger name (defaults to class name)
        """
        self.model = model_class
        self.logger = logging.getLogger(logger_name or self.__class__.__name__)

    def get_or_none(self, resource_id) -> Optional[DeclarativeBase]:
        return db.session.get(self.model, resource_id)

    def create(self, validate_func: Optional[Callable] = None) -> tuple:
        """Create a new resource and return its serialized row.

        Args:
            validate_func: Optional custom validation function that takes data dict
                         and returns validated data dict

        Returns:
            Flask JSON response with the created row (201)
        """
        try:
            data = self.get_json_data()

            if validate_func:
                validated_data = validate_func(data)
            else:
                validated_data = self.validate_create_data(data)

            resource = self.model(**validated_data)
            db.session.add(resource)
            db.session.commit()

            self.logger.info(f"Created {self.get_singular_name()}: {resource.id}")
            return jsonify(self.serialize(resource)), 201

        except ValidationError as e:
            self.logger.warning(f"Validation error in {self.get_singular_name()} creation: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 400
        except PermissionError as e:
            self.logger.warning(f"Permission denied creating {self.get_singular_name()}: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 403
        except Exception as e:
            self.logger.error(f"Failed to create {self.get_singular_name()}: {e}", exc_info=True)
            db.session.rollback()
            return jsonify({'error': f'Failed to create {self.get_singular_name()}'}), 500

    def update(self, resource_id, validate_func: Optional[Callable] = None) -> tuple:
        """Update an existing resource and return the updated row.

        Args:
            resource_id: Primary key of the resource
            validate_func: Optional custom validation function that takes (data, resource)
                         and returns validated data dict

        Returns:
            Flask JSON response with the updated row
        """
        try:
            data = self.get_json_data()
            resource = self.get_or_none(resource_id)
            if resource is None:
                return jsonify({'error': f'{self.get_singular_name().title()} not found'}), 404

            if validate_func:
                validated_data = validate_func(data, resource)
            else:
                validated_data = self.validate_update_data(data)

            for key, value in validated_data.items():
                setattr(resource, key, value)

            db.session.commit()

            self.logger.info(f"Updated {self.get_singular_name()}: {resource_id}")
            return jsonify(self.serialize(resource))

        except ValidationError as e:
            self.logger.warning(f"Validation error in {self.get_singular_name()} update: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 400
        except PermissionError as e:
            self.logger.warning(f"Permission denied updating {self.get_singular_name()} {resource_id}: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 403
        except Exception as e:
            self.logger.error(f"Failed to update {self.get_singular_name()}: {e}", exc_info=True)
            db.session.rollback()
            return jsonify({'error': f'Failed to update {self.get_singular_name()}'}), 500

    def serialize(self, resource: DeclarativeBase) -> Dict[str, Any]:
        """Serialize resource to dictionary.

        Subclasses should override this method to customize serialization.
        """
        result = {}
        for column in resource.__table__.columns:
            value = getattr(resource, column.name)
            if hasattr(value, 'isoformat'):
                result[column.name] = value.isoformat()
            elif hasattr(value, 'value'):
                result[column.name] = value.value
            else:
                result[column.name] = value
        return result

    def get_json_data(self) -> Dict[str, Any]:
        """Get and validate JSON data from request.

        Raises:
            ValidationError: If JSON is invalid or not a dict
        """
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError('Request body must contain valid JSON')
        if not isinstance(data, dict):
            raise ValidationError('Request data must be a JSON object')
        return data

    def validate_create_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data

    def validate_update_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data

    def get_singular_name(self) -> str:
        """Get singular resource name for messages (table name minus trailing 's')."""
        table_name = self.model.__tablename__
        if table_name.endswith('s'):
            return table_name[:-1]
        return table_name
