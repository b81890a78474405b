"""Shared utilities package for the Restroom Finder application.

This package contains shared code used by both the backend data service and the
BeeWare client application. It includes:

- Database models (models.py) - SQLAlchemy models for users, restrooms, reviews and reports
- Enums (enums.py) - Shared enumeration definitions for status values and categories
- Validation utilities (validation.py, schemas.py) - Input validation and sanitization
- Utility functions (utils.py) - Haversine distance, radius filtering and bounding boxes

All shared components are designed to work identically in both backend and frontend contexts.
"""
